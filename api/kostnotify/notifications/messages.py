"""Localized notification text (Indonesian default, English)."""

from typing import Optional

DEFAULT_LOCALE = "id"

MESSAGES: dict[str, dict[str, str]] = {
    "id": {
        "greeting": "Halo {name},",
        "details_payment": "Detail pembayaran:",
        "details_rental": "Detail sewa:",
        "label_period": "Periode",
        "label_amount": "Jumlah",
        "label_paid_at": "Tanggal bayar",
        "label_transaction": "ID Transaksi",
        "label_kostan": "Kostan",
        "label_room": "Kamar",
        "label_due_date": "Jatuh tempo",
        "label_start_date": "Tanggal mulai",
        "label_monthly_price": "Harga bulanan",
        "not_available": "Tidak tersedia",
        "thanks_service": "Terima kasih telah menggunakan layanan kami!",
        # payment_received
        "pr_subject": "Pembayaran Diterima - {month}",
        "pr_title": "Pembayaran Diterima",
        "pr_summary": "Pembayaran sewa bulan {month} telah diterima. Terima kasih!",
        "pr_chat_intro": "Pembayaran Anda untuk periode <b>{month}</b> telah diterima!",
        "pr_thanks": "Terima kasih atas pembayaran tepat waktu!",
        "pr_action": "Lihat Kwitansi",
        "pr_chat_link": "Lihat kwitansi",
        # payment_reminder
        "rem_title": "Pengingat Pembayaran",
        "rem_summary": "Pengingat: Pembayaran sewa bulan ini akan jatuh tempo pada {date}.",
        "rem_chat_intro": "Ini adalah pengingat bahwa pembayaran Anda akan jatuh tempo pada tanggal <b>{date}</b>.",
        "rem_chat_advice": "Silakan lakukan pembayaran sebelum tanggal jatuh tempo untuk menghindari denda keterlambatan.",
        "rem_action": "Bayar Sekarang",
        "rem_chat_link": "Bayar sekarang",
        # rental_approved
        "ra_subject": "Selamat! Pengajuan Sewa Anda Disetujui",
        "ra_title": "Pengajuan Sewa Disetujui",
        "ra_summary": "Selamat! Pengajuan sewa Anda telah disetujui.",
        "ra_chat_title": "Selamat! Pengajuan Sewa Disetujui",
        "ra_chat_intro": "Pengajuan sewa Anda telah <b>disetujui</b>! 🏠",
        "ra_welcome": "Selamat datang di keluarga besar kami!",
        "ra_action": "Lihat Detail",
        "ra_chat_link": "Lihat detail",
        # linking conversation
        "link_welcome_title": "Selamat datang di {app}!",
        "link_welcome_intro": "Untuk menerima notifikasi melalui Telegram, silakan:",
        "link_welcome_step_phone": "Bagikan nomor HP yang terdaftar di akun {app} Anda",
        "link_welcome_step_admin": "Atau hubungi admin untuk menghubungkan akun Telegram Anda",
        "link_chat_id": "Chat ID Anda",
        "link_username": "Username",
        "link_no_username": "Tidak ada",
        "link_welcome_outro": "Berikan informasi ini kepada admin untuk aktivasi notifikasi.",
        "link_success_title": "Registrasi Berhasil!",
        "link_success_intro": "Akun Telegram Anda telah terhubung dengan akun {app}.",
        "link_success_list": "Anda akan menerima notifikasi untuk:",
        "link_success_payment_received": "Pembayaran diterima",
        "link_success_payment_reminder": "Pengingat pembayaran",
        "link_success_rental_approved": "Persetujuan sewa",
        "link_success_outro": "Terima kasih telah menggunakan layanan kami! 😊",
        "link_failed_title": "Registrasi Gagal",
        "link_failed_body": "Terjadi kesalahan saat menghubungkan akun Anda.\nSilakan hubungi admin untuk bantuan.",
        "link_not_found_title": "Nomor Tidak Ditemukan",
        "link_not_found_body": "Nomor HP {phone} tidak terdaftar di sistem {app}.",
        "link_not_found_hint": "Pastikan Anda sudah mendaftar di aplikasi dengan nomor HP yang sama.",
        "test_message": "🤖 Test message dari {app}!\n\nNotifikasi Telegram berhasil dikonfigurasi.",
    },
    "en": {
        "greeting": "Hello {name},",
        "details_payment": "Payment details:",
        "details_rental": "Rental details:",
        "label_period": "Period",
        "label_amount": "Amount",
        "label_paid_at": "Paid on",
        "label_transaction": "Transaction ID",
        "label_kostan": "Boarding house",
        "label_room": "Room",
        "label_due_date": "Due date",
        "label_start_date": "Start date",
        "label_monthly_price": "Monthly price",
        "not_available": "Not available",
        "thanks_service": "Thank you for using our service!",
        "pr_subject": "Payment Received - {month}",
        "pr_title": "Payment Received",
        "pr_summary": "Rent payment for {month} has been received. Thank you!",
        "pr_chat_intro": "Your payment for <b>{month}</b> has been received!",
        "pr_thanks": "Thank you for paying on time!",
        "pr_action": "View Receipt",
        "pr_chat_link": "View receipt",
        "rem_title": "Payment Reminder",
        "rem_summary": "Reminder: Your rent payment is due on {date}.",
        "rem_chat_intro": "This is a reminder that your payment is due on <b>{date}</b>.",
        "rem_chat_advice": "Please pay before the due date to avoid late fees.",
        "rem_action": "Pay Now",
        "rem_chat_link": "Pay now",
        "ra_subject": "Congratulations! Your Rental Application Was Approved",
        "ra_title": "Rental Approved",
        "ra_summary": "Congratulations! Your rental application has been approved.",
        "ra_chat_title": "Congratulations! Rental Approved",
        "ra_chat_intro": "Your rental application has been <b>approved</b>! 🏠",
        "ra_welcome": "Welcome to our big family!",
        "ra_action": "View Details",
        "ra_chat_link": "View details",
        "link_welcome_title": "Welcome to {app}!",
        "link_welcome_intro": "To receive notifications on Telegram:",
        "link_welcome_step_phone": "Share the phone number registered on your {app} account",
        "link_welcome_step_admin": "Or contact an administrator to link your Telegram account",
        "link_chat_id": "Your Chat ID",
        "link_username": "Username",
        "link_no_username": "None",
        "link_welcome_outro": "Give this information to the administrator to activate notifications.",
        "link_success_title": "Registration Successful!",
        "link_success_intro": "Your Telegram account is now linked to your {app} account.",
        "link_success_list": "You will be notified about:",
        "link_success_payment_received": "Payments received",
        "link_success_payment_reminder": "Payment reminders",
        "link_success_rental_approved": "Rental approvals",
        "link_success_outro": "Thank you for using our service! 😊",
        "link_failed_title": "Registration Failed",
        "link_failed_body": "Something went wrong while linking your account.\nPlease contact an administrator.",
        "link_not_found_title": "Number Not Found",
        "link_not_found_body": "Phone number {phone} is not registered with {app}.",
        "link_not_found_hint": "Make sure you registered in the app with the same phone number.",
        "test_message": "🤖 Test message from {app}!\n\nTelegram notifications are configured.",
    },
}


def resolve_locale(locale: Optional[str], default: str = DEFAULT_LOCALE) -> str:
    if locale:
        language = locale.replace("-", "_").split("_")[0].lower()
        if language in MESSAGES:
            return language
    return default if default in MESSAGES else DEFAULT_LOCALE


def t(locale: str, key: str, **params) -> str:
    text = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE]).get(key) or MESSAGES[DEFAULT_LOCALE][key]
    return text.format(**params) if params else text
