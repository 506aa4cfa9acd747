"""HTML bodies for booking notification emails."""

from dataclasses import dataclass
from datetime import date, datetime
from html import escape
from typing import Optional

from ..models.booking import Booking


@dataclass(frozen=True)
class BookingEmailDetails:
    """Everything the booking emails show, captured when the booking is created."""

    booking_id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    travel_date: date
    num_travelers: int
    total_price: Optional[float]
    created_at: datetime
    tour_title: Optional[str] = None
    customer_nationality: Optional[str] = None
    customer_cnic: Optional[str] = None
    customer_address: Optional[str] = None
    special_requests: Optional[str] = None

    @classmethod
    def from_booking(cls, booking: Booking, tour_title: Optional[str]) -> "BookingEmailDetails":
        return cls(
            booking_id=str(booking.id),
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            customer_phone=booking.customer_phone,
            travel_date=booking.travel_date,
            num_travelers=booking.num_travelers,
            total_price=booking.total_price,
            created_at=booking.created_at,
            tour_title=tour_title,
            customer_nationality=booking.customer_nationality,
            customer_cnic=booking.customer_cnic,
            customer_address=booking.customer_address,
            special_requests=booking.special_requests,
        )

    @property
    def reference(self) -> str:
        """Short booking reference quoted to customers."""
        return self.booking_id[:8].upper()


def format_price(price: Optional[float]) -> str:
    """``PKR 15,000`` style amount; unpriced or zero bookings are quoted later."""
    if not price:
        return "To be confirmed"
    if float(price).is_integer():
        return f"PKR {price:,.0f}"
    return f"PKR {price:,.2f}".rstrip("0").rstrip(".")


def format_date(value: date) -> str:
    """Long form date, e.g. ``Monday, January 15, 2025``."""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def _row(label: str, value: str) -> str:
    return (
        '<tr><td style="color:#666;padding:8px 0;">'
        f"{escape(label)}</td>"
        f'<td style="font-weight:600;padding:8px 0;text-align:right;">{value}</td></tr>'
    )


def _document(header_color: str, title: str, subtitle: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family:'Segoe UI',Arial,sans-serif;line-height:1.6;color:#333;">
  <div style="max-width:600px;margin:0 auto;padding:20px;">
    <div style="background:{header_color};color:white;padding:28px;text-align:center;border-radius:10px 10px 0 0;">
      <h1 style="margin:0;">{escape(title)}</h1>
      <p style="margin:10px 0 0 0;opacity:0.9;">{escape(subtitle)}</p>
    </div>
    <div style="background:#f9f9f9;padding:28px;border-radius:0 0 10px 10px;">
{body}
    </div>
  </div>
</body>
</html>
"""


def customer_confirmation(details: BookingEmailDetails, company_name: str, support_email: str) -> tuple[str, str]:
    """
    Build the customer's booking acknowledgement.

    Returns:
        (subject, html)
    """
    rows = [_row("Booking ID", escape(details.reference))]
    if details.tour_title:
        rows.append(_row("Tour", escape(details.tour_title)))
    rows.extend([
        _row("Travel Date", escape(format_date(details.travel_date))),
        _row("Travelers", f"{details.num_travelers} person(s)"),
        _row("Total Amount", f'<span style="color:#1a5f2a;">{escape(format_price(details.total_price))}</span>'),
    ])

    body = f"""      <p>Dear <strong>{escape(details.customer_name)}</strong>,</p>
      <p>Thank you for your booking request. Our team will contact you shortly with more details about your trip.</p>
      <table style="width:100%;background:white;padding:16px;border-radius:8px;">{''.join(rows)}</table>
      <p><strong>What's next?</strong></p>
      <ul>
        <li>Our team will call you within 24 hours to confirm details</li>
        <li>You'll receive a detailed itinerary via WhatsApp or email</li>
        <li>Payment instructions will be shared during the call</li>
      </ul>
      <p>For any queries, contact us at {escape(support_email)}.</p>
      <p style="text-align:center;color:#666;font-size:14px;">&copy; {details.created_at.year} {escape(company_name)}</p>"""

    subject = f"Booking Confirmed - {details.tour_title or 'Your Tour'} | {company_name}"
    html = _document(
        "linear-gradient(135deg,#1a5f2a 0%,#2d8a3e 100%)",
        "Booking Confirmed!",
        f"Thank you for choosing {company_name}",
        body,
    )
    return subject, html


def admin_alert(details: BookingEmailDetails) -> tuple[str, str]:
    """
    Build the back-office alert for a new booking.

    Returns:
        (subject, html)
    """
    email = escape(details.customer_email)
    phone = escape(details.customer_phone)

    customer_rows = [
        _row("Full Name", escape(details.customer_name)),
        _row("Email", f'<a href="mailto:{email}">{email}</a>'),
        _row("Phone", f'<a href="tel:{phone}">{phone}</a>'),
    ]
    for label, value in (
        ("Nationality", details.customer_nationality),
        ("CNIC", details.customer_cnic),
        ("Address", details.customer_address),
    ):
        if value:
            customer_rows.append(_row(label, escape(value)))

    trip_rows = [_row("Booking ID", escape(details.booking_id))]
    if details.tour_title:
        trip_rows.append(_row("Tour Package", escape(details.tour_title)))
    trip_rows.extend([
        _row("Travel Date", escape(format_date(details.travel_date))),
        _row("Number of Travelers", f"{details.num_travelers} person(s)"),
    ])

    requests_block = ""
    if details.special_requests:
        requests_block = (
            "      <h3>Special Requests</h3>\n"
            f'      <p style="color:#4b5563;">{escape(details.special_requests)}</p>\n'
        )

    body = f"""      <p style="background:#fef2f2;border-left:4px solid #ef4444;padding:12px;">
        <strong>Action required:</strong> contact the customer within 24 hours to confirm booking details.
      </p>
      <h3>Customer Information</h3>
      <table style="width:100%;background:white;padding:16px;border-radius:8px;">{''.join(customer_rows)}</table>
      <h3>Tour Details</h3>
      <table style="width:100%;background:white;padding:16px;border-radius:8px;">{''.join(trip_rows)}</table>
{requests_block}      <div style="background:#ecfdf5;padding:15px;border-radius:8px;text-align:center;">
        <div style="color:#6b7280;font-size:13px;">TOTAL BOOKING AMOUNT</div>
        <div style="font-size:24px;color:#059669;font-weight:bold;">{escape(format_price(details.total_price))}</div>
      </div>"""

    subject = (
        f"New Booking: {details.customer_name} - {details.tour_title or 'Tour'} "
        f"| {format_date(details.travel_date)}"
    )
    html = _document(
        "linear-gradient(135deg,#d97706 0%,#f59e0b 100%)",
        "New Booking Alert!",
        details.created_at.strftime("%d/%m/%Y, %H:%M:%S UTC"),
        body,
    )
    return subject, html
