from __future__ import annotations

from html import escape


def stock_saved(hospital_name: str, line_count: int) -> tuple[str, str]:
    subject = "Blood stock updated"
    body = (
        f"<p>Hello {escape(hospital_name)},</p>"
        f"<p>Your blood stock has been saved ({line_count} blood group(s)).</p>"
        "<p>Thank you for keeping your availability up to date.</p>"
    )
    return subject, body


def hospital_welcome(name: str) -> tuple[str, str]:
    subject = "Hospital registration successful"
    body = (
        f"<p>Welcome {escape(name)},</p>"
        "<p>Your hospital account is ready. You can now publish blood stock and requests.</p>"
    )
    return subject, body


def donor_welcome(name: str) -> tuple[str, str]:
    subject = "Thank you for registering as a donor"
    body = (
        f"<p>Hi {escape(name)},</p>"
        "<p>You will be notified when a hospital needs your blood type.</p>"
    )
    return subject, body


def blood_request(donor_name: str, *, blood_type: str, hospital_name: str | None,
                  quantity: int | None, urgency: str | None, contact: str | None) -> tuple[str, str]:
    subject = f"Urgent: {blood_type} blood needed"
    rows = [
        ("Hospital", hospital_name),
        ("Blood type", blood_type),
        ("Units", quantity),
        ("Urgency", urgency),
        ("Contact", contact),
    ]
    details = "".join(
        f"<li><b>{label}:</b> {escape(str(value))}</li>" for label, value in rows if value not in (None, "")
    )
    body = (
        f"<p>Dear {escape(donor_name)},</p>"
        "<p>A hospital has requested blood matching your type.</p>"
        f"<ul>{details}</ul>"
    )
    return subject, body
