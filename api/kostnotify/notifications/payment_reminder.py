"""payment_reminder: rent is coming due for a tenant's room."""

import html
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from kostnotify.channels import ChatMessage, InAppMessage, MailMessage
from kostnotify.notifications.base import NotificationKind, RenderContext
from kostnotify.notifications.formatting import format_currency, format_long_date
from kostnotify.notifications.messages import t


class PaymentReminder(BaseModel):
    due_date: date
    amount: Decimal = Field(ge=0)
    kostan_name: str
    room_number: str


def _details(p: PaymentReminder, ctx: RenderContext) -> tuple[str, list[tuple[str, str]]]:
    due = format_long_date(p.due_date, ctx.locale)
    rows = [
        (t(ctx.locale, "label_kostan"), p.kostan_name),
        (t(ctx.locale, "label_room"), p.room_number),
        (t(ctx.locale, "label_amount"), format_currency(p.amount, ctx.locale)),
        (t(ctx.locale, "label_due_date"), due),
    ]
    return due, rows


def to_mail(p: PaymentReminder, ctx: RenderContext) -> MailMessage:
    due, rows = _details(p, ctx)
    summary = t(ctx.locale, "rem_summary", date=due)
    return MailMessage(
        subject=summary,
        greeting=t(ctx.locale, "greeting", name=ctx.recipient_name),
        lines=[summary, t(ctx.locale, "details_payment")]
        + [f"- {label}: {value}" for label, value in rows],
        action_text=t(ctx.locale, "rem_action"),
        action_url=ctx.url("/payments"),
        outro_lines=[t(ctx.locale, "thanks_service")],
    )


def to_telegram(p: PaymentReminder, ctx: RenderContext) -> ChatMessage:
    due, rows = _details(p, ctx)
    loc = ctx.locale
    lines = [
        f"⏰ <b>{t(loc, 'rem_title')}</b>",
        "",
        t(loc, "greeting", name=html.escape(ctx.recipient_name)),
        "",
        t(loc, "rem_chat_intro", date=html.escape(due)),
        "",
        f"📋 <b>{t(loc, 'details_payment')}</b>",
    ]
    lines += [f"• {label}: {html.escape(value)}" for label, value in rows]
    lines += [
        "",
        f"💳 {t(loc, 'rem_chat_advice')}",
        "",
        f"💻 {t(loc, 'rem_chat_link')}: {html.escape(ctx.url('/payments'))}",
    ]
    return ChatMessage(text="\n".join(lines))


def to_in_app(p: PaymentReminder, ctx: RenderContext) -> InAppMessage:
    due, _ = _details(p, ctx)
    return InAppMessage(
        type="payment_reminder",
        title=t(ctx.locale, "rem_title"),
        message=t(ctx.locale, "rem_summary", date=due),
        data={
            "due_date": p.due_date.isoformat(),
            "amount": float(p.amount),
            "kostan_name": p.kostan_name,
            "room_number": p.room_number,
        },
        action_url=ctx.url("/payments"),
        priority="high",
    )


payment_reminder = NotificationKind(
    event_type="payment_reminder",
    payload_model=PaymentReminder,
    to_mail=to_mail,
    to_in_app=to_in_app,
    to_telegram=to_telegram,
)
