"""
Notification Templates
One renderer per event kind. Each renderer turns a typed payload into the
email, SMS and push bodies for that event. Optional fields that are missing
are left out of the rendered text.
"""

from html import escape
from typing import Optional

from .events import (
    AppointmentPayload,
    ChatMessagePayload,
    HealthAlertPayload,
    MedicalNotePayload,
    MedicationPayload,
    OrderStatusPayload,
    PatientRecordViewedPayload,
    Recipient,
    WelcomePayload,
)
from .messages import EmailMessage, PushMessage, RenderedMessages, SMSMessage

# App theme colors
THEME = {
    "primary": "#4F46E5",
    "danger": "#DC2626",
    "panel_bg": "#f3f4f6",
    "text_muted": "#6b7280",
}

MEETING_LINK_FALLBACK = "To be provided"

ORDER_STATUS_MESSAGES = {
    "pending": "Your order has been received.",
    "confirmed": "Your order has been confirmed and is being prepared.",
    "preparing": "Your order is being prepared.",
    "out-for-delivery": "Your order is out for delivery!",
    "delivered": "Your order has been delivered. Enjoy!",
    "cancelled": "Your order has been cancelled.",
}


def get_base_template(
    title: str,
    greeting_name: str,
    content_sections: str,
    accent: str = THEME["primary"],
    closing: str = "Best regards,<br>The MCaid Team",
) -> str:
    """Base HTML wrapper shared by all notification emails"""
    greeting = f"Dear {escape(greeting_name)}," if greeting_name else "Hello,"
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: {accent};">{escape(title)}</h2>
      <p>{greeting}</p>
      {content_sections}
      <p>{closing}</p>
    </div>
    """


def detail_panel(rows: list[tuple[str, Optional[str]]]) -> str:
    """Render label/value rows, skipping rows whose value is missing"""
    lines = [
        f"<p><strong>{escape(label)}:</strong> {escape(value)}</p>" for label, value in rows if value
    ]
    return (
        f'<div style="background-color: {THEME["panel_bg"]}; padding: 15px; '
        f'border-radius: 8px; margin: 20px 0;">' + "".join(lines) + "</div>"
    )


def _join_present(parts: list[Optional[str]], sep: str = ", ") -> str:
    return sep.join(p for p in parts if p)


def _first_name(recipient: Recipient) -> str:
    return recipient.name.split()[0] if recipient.name.strip() else ""


def _with_title(name: str) -> str:
    return name if name.lower().startswith(("dr.", "dr ")) else f"Dr. {name}"


# ============================================
# Appointments
# ============================================


def _meeting_link_html(link: Optional[str]) -> str:
    if link:
        return f'<p>Meeting link: <a href="{escape(link, quote=True)}">Join Meeting</a> ({escape(link)})</p>'
    return f"<p>Meeting link: {MEETING_LINK_FALLBACK}</p>"


def render_appointment_created(payload: AppointmentPayload, recipient: Recipient) -> RenderedMessages:
    meeting_link = payload.meeting_link or MEETING_LINK_FALLBACK
    data = {"type": "appointment"}
    if payload.appointment_id:
        data["appointmentId"] = payload.appointment_id

    if payload.initiated_by == "mother":
        patient = payload.patient_name or "A patient"
        summary = f"{patient} has booked an appointment with you on {payload.date} at {payload.time}"
        html = get_base_template(
            "New Appointment Booked",
            _first_name(recipient) and _with_title(_first_name(recipient)),
            f"<p>{escape(patient)} has booked an appointment with you.</p>"
            + detail_panel(
                [
                    ("Patient", payload.patient_name),
                    ("Date", payload.date),
                    ("Time", payload.time),
                    ("Type", payload.appointment_type),
                    ("Notes", payload.notes),
                ]
            )
            + "<p>Please log in to your dashboard to view more details.</p>",
        )
        return RenderedMessages(
            email=EmailMessage(subject="New Appointment Booked - MCaid", html=html, text=summary),
            sms=SMSMessage(text=summary),
            push=PushMessage(title="New Appointment Booked", body=summary, data=data),
        )

    doctor = _with_title(payload.doctor_name)
    reminder = (
        f"Reminder: You have an appointment with {doctor} on {payload.date} at {payload.time}. "
        f"Meeting link: {meeting_link}"
    )
    html = get_base_template(
        "Appointment Reminder",
        _first_name(recipient),
        "<p>This is a reminder for your upcoming appointment:</p>"
        + detail_panel(
            [
                ("Date", payload.date),
                ("Time", payload.time),
                ("Type", payload.appointment_type),
                ("Doctor", doctor),
                ("Location", payload.location),
                ("Notes", payload.notes),
            ]
        )
        + _meeting_link_html(payload.meeting_link),
    )
    return RenderedMessages(
        email=EmailMessage(subject="Appointment Reminder - MCaid", html=html, text=reminder),
        sms=SMSMessage(text=reminder),
        push=PushMessage(
            title="New Appointment Scheduled",
            body=f"{doctor} has scheduled an appointment with you on {payload.date} at {payload.time}",
            data=data,
        ),
    )


def render_appointment_updated(payload: AppointmentPayload, recipient: Recipient) -> RenderedMessages:
    # The recipient is the party that did not make the change
    if payload.initiated_by == "mother":
        counterpart = payload.patient_name or "Your patient"
    else:
        counterpart = _with_title(payload.doctor_name)

    status = f" Status: {payload.status}." if payload.status else ""
    summary = f"Your appointment with {counterpart} has been updated to {payload.date} at {payload.time}.{status}"
    data = {"type": "appointment-updated"}
    if payload.appointment_id:
        data["appointmentId"] = payload.appointment_id

    html = get_base_template(
        "Appointment Updated",
        _first_name(recipient),
        f"<p>Your appointment with {escape(counterpart)} has been updated:</p>"
        + detail_panel(
            [
                ("Date", payload.date),
                ("Time", payload.time),
                ("Type", payload.appointment_type),
                ("Status", payload.status),
                ("Location", payload.location),
                ("Notes", payload.notes),
            ]
        )
        + _meeting_link_html(payload.meeting_link),
    )
    return RenderedMessages(
        email=EmailMessage(subject="Appointment Updated - MCaid", html=html, text=summary),
        sms=SMSMessage(text=summary),
        push=PushMessage(title="Appointment Updated", body=summary, data=data),
    )


# ============================================
# Medications
# ============================================


def render_medication_prescribed(payload: MedicationPayload, recipient: Recipient) -> RenderedMessages:
    prescriber = _with_title(payload.prescriber_name) if payload.prescriber_name else "Your healthcare provider"
    instructions = _join_present([payload.dosage, payload.frequency])
    summary = f"{prescriber} has prescribed {payload.medication_name}"
    if instructions:
        summary += f" ({instructions})"

    html = get_base_template(
        "New Medication Prescribed",
        _first_name(recipient),
        f"<p>{escape(prescriber)} has prescribed a new medication for you:</p>"
        + detail_panel(
            [
                ("Medication", payload.medication_name),
                ("Dosage", payload.dosage),
                ("Frequency", payload.frequency),
                ("Start Date", payload.start_date),
                ("End Date", payload.end_date),
            ]
        )
        + "<p>Please follow the prescribed instructions carefully. "
        "If you have any questions, contact your healthcare provider.</p>",
    )
    return RenderedMessages(
        email=EmailMessage(subject="New Medication Prescribed", html=html, text=summary),
        sms=SMSMessage(text=summary),
        push=PushMessage(
            title="New Medication Prescribed",
            body=summary,
            data={"type": "medication", "medicationName": payload.medication_name},
        ),
    )


# ============================================
# Orders
# ============================================


def render_order_status_changed(payload: OrderStatusPayload, recipient: Recipient) -> RenderedMessages:
    status_message = ORDER_STATUS_MESSAGES.get(payload.status, "Status updated")
    summary = f"Order {payload.tracking_number}: {status_message}"
    data = {"type": "order", "status": payload.status}
    if payload.order_id:
        data["orderId"] = payload.order_id

    html = get_base_template(
        "Order Update",
        _first_name(recipient),
        f"<p>{escape(status_message)}</p>"
        + detail_panel(
            [
                ("Order Number", payload.tracking_number),
                ("Status", payload.status),
                ("Estimated Delivery", payload.estimated_delivery),
            ]
        ),
        closing="Thank you for using MCaid!",
    )
    return RenderedMessages(
        email=EmailMessage(subject=f"Order Update - {payload.tracking_number}", html=html, text=summary),
        sms=SMSMessage(text=summary),
        push=PushMessage(title="Order Update", body=summary, data=data),
    )


# ============================================
# Health alerts
# ============================================


def render_health_alert(payload: HealthAlertPayload, recipient: Recipient) -> RenderedMessages:
    html = get_base_template(
        "Health Alert",
        _first_name(recipient),
        f"<p>{escape(payload.message)}</p>"
        "<p><strong>Please consult with your healthcare provider if you have concerns.</strong></p>",
        accent=THEME["danger"],
        closing="Stay safe,<br>The MCaid Team",
    )
    return RenderedMessages(
        email=EmailMessage(subject=f"Health Alert - {payload.alert_type}", html=html, text=payload.message),
        sms=SMSMessage(text=f"Health Alert: {payload.message}"),
        push=PushMessage(
            title=f"Health Alert - {payload.alert_type}",
            body=payload.message,
            data={"type": "health-alert", "alertType": payload.alert_type},
        ),
    )


# ============================================
# Chat
# ============================================


def render_chat_message(payload: ChatMessagePayload, recipient: Recipient) -> RenderedMessages:
    data = {"type": "chat"}
    if payload.chat_room:
        data["chatRoom"] = payload.chat_room
    return RenderedMessages(
        push=PushMessage(title=f"New message from {payload.sender_name}", body=payload.preview, data=data)
    )


# ============================================
# Accounts
# ============================================


def render_user_registered(payload: WelcomePayload, recipient: Recipient) -> RenderedMessages:
    link_html = ""
    if payload.app_link:
        link_html = (
            f'<p><a href="{escape(payload.app_link, quote=True)}" style="background-color: {THEME["primary"]}; '
            'color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px;">Open MCaid</a></p>'
        )
    html = get_base_template(
        "Welcome to MCaid!",
        payload.first_name,
        "<p>Welcome to MCaid - your comprehensive health monitoring platform for pregnancy care.</p>"
        + link_html
        + "<p>If you didn't create this account, please ignore this email.</p>",
    )
    text = "Welcome to MCaid - your comprehensive health monitoring platform for pregnancy care."
    if payload.app_link:
        text += f" Get started: {payload.app_link}"
    return RenderedMessages(email=EmailMessage(subject="Welcome to MCaid!", html=html, text=text))


# ============================================
# Medical record activity
# ============================================


def render_medical_note_added(payload: MedicalNotePayload, recipient: Recipient) -> RenderedMessages:
    author = _with_title(payload.author_name)
    return RenderedMessages(
        push=PushMessage(
            title="Medical Note Added",
            body=f"{author} has added a note to your medical record",
            data={"type": "medical-note"},
        )
    )


def render_patient_record_viewed(payload: PatientRecordViewedPayload, recipient: Recipient) -> RenderedMessages:
    data = {"type": "medical-review"}
    if payload.medical_personnel_id:
        data["medicalPersonnelId"] = payload.medical_personnel_id
    return RenderedMessages(
        push=PushMessage(
            title="Medical Review",
            body=f"{_with_title(payload.reviewer_name)} is reviewing your medical information",
            data=data,
        )
    )
