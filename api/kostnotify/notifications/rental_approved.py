"""rental_approved: an owner approved a tenant's rental application."""

import html
from datetime import date
from decimal import Decimal
from typing import Union

from pydantic import BaseModel, Field

from kostnotify.channels import ChatMessage, InAppMessage, MailMessage
from kostnotify.notifications.base import NotificationKind, RenderContext
from kostnotify.notifications.formatting import format_currency, format_long_date
from kostnotify.notifications.messages import t


class RentalApproved(BaseModel):
    rental_id: Union[int, str]
    kostan_name: str
    room_name: str
    start_date: date
    monthly_price: Decimal = Field(ge=0)


def to_mail(p: RentalApproved, ctx: RenderContext) -> MailMessage:
    loc = ctx.locale
    return MailMessage(
        subject=t(loc, "ra_subject"),
        greeting=t(loc, "greeting", name=ctx.recipient_name),
        lines=[
            t(loc, "ra_summary"),
            t(loc, "details_rental"),
            f"- {t(loc, 'label_kostan')}: {p.kostan_name}",
            f"- {t(loc, 'label_room')}: {p.room_name}",
            f"- {t(loc, 'label_start_date')}: {format_long_date(p.start_date, loc)}",
            f"- {t(loc, 'label_monthly_price')}: {format_currency(p.monthly_price, loc)}",
        ],
        action_text=t(loc, "ra_action"),
        action_url=ctx.url("/my-rentals"),
        outro_lines=[t(loc, "ra_welcome")],
    )


def to_telegram(p: RentalApproved, ctx: RenderContext) -> ChatMessage:
    loc = ctx.locale
    esc = html.escape
    text = (
        f"🎉 <b>{t(loc, 'ra_chat_title')}</b>\n\n"
        f"{t(loc, 'greeting', name=esc(ctx.recipient_name))}\n\n"
        f"{t(loc, 'ra_chat_intro')}\n\n"
        f"📋 <b>{t(loc, 'details_rental')}</b>\n"
        f"• {t(loc, 'label_kostan')}: {esc(p.kostan_name)}\n"
        f"• {t(loc, 'label_room')}: {esc(p.room_name)}\n"
        f"• {t(loc, 'label_start_date')}: {esc(format_long_date(p.start_date, loc))}\n"
        f"• {t(loc, 'label_monthly_price')}: {esc(format_currency(p.monthly_price, loc))}\n\n"
        f"🎊 {t(loc, 'ra_welcome')}\n\n"
        f"💻 {t(loc, 'ra_chat_link')}: {esc(ctx.url('/my-rentals'))}"
    )
    return ChatMessage(text=text)


def to_in_app(p: RentalApproved, ctx: RenderContext) -> InAppMessage:
    return InAppMessage(
        type="rental_approved",
        title=t(ctx.locale, "ra_title"),
        message=t(ctx.locale, "ra_summary"),
        data={
            "rental_id": p.rental_id,
            "kostan_name": p.kostan_name,
            "room_name": p.room_name,
            "start_date": p.start_date.isoformat(),
            "monthly_price": float(p.monthly_price),
        },
        action_url=ctx.url("/my-rentals"),
    )


rental_approved = NotificationKind(
    event_type="rental_approved",
    payload_model=RentalApproved,
    to_mail=to_mail,
    to_in_app=to_in_app,
    to_telegram=to_telegram,
)
