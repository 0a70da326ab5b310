import re
from datetime import datetime
from typing import List, Optional
from urllib.parse import quote

from gymdesk.config import settings
from gymdesk.models.trainee import Trainee
from gymdesk.models.trainer import Trainer
from gymdesk.schemas.plan import WorkoutDay, DietDay


def whatsapp_digits(phone_number: str) -> str:
    """Digits-only phone with the country code prefixed to bare local numbers."""
    digits = re.sub(r"\D", "", phone_number or "")
    if len(digits) == 10:
        digits = f"{settings.WHATSAPP_COUNTRY_CODE}{digits}"
    return digits


def whatsapp_link(phone_number: str, message: str) -> str:
    return f"https://wa.me/{whatsapp_digits(phone_number)}?text={quote(message, safe='')}"


def expiry_reminder(trainee_name: str, expiry_date: datetime) -> str:
    return (
        f"Hello {trainee_name}, your membership plan will expire on "
        f"{expiry_date.strftime('%d/%m/%Y')}. Please renew."
    )


def invoice_message(trainee: Trainee, invoice_no: Optional[str] = None, issued_at: Optional[datetime] = None) -> str:
    issued_at = issued_at or datetime.now()
    invoice_no = invoice_no or f"INV-{trainee.member_id}-{str(int(issued_at.timestamp() * 1000))[-6:]}"
    return "\n".join([
        f"*INVOICE - {settings.GYM_NAME}*",
        "",
        "*Invoice Details:*",
        f"• Invoice No: {invoice_no}",
        f"• Date: {issued_at.strftime('%d/%m/%Y')}",
        "",
        "*Member Information:*",
        f"• Name: {trainee.name}",
        f"• Member ID: {trainee.member_id}",
        f"• Phone: {trainee.phone_number}",
        "",
        "*Membership Details:*",
        f"• Admission Date: {trainee.membership_start_date.strftime('%d/%m/%Y')}",
        f"• Duration: {trainee.membership_duration} month(s)",
        f"• Expires: {trainee.membership_end_date.strftime('%d/%m/%Y')}",
        f"• Goal: {trainee.goal_category.value}",
        f"• Special Training: {'Yes' if trainee.special_training else 'No'}",
        f"• Payment Type: {trainee.payment_type.value}",
        "",
        f"• Total Amount: *₹{trainee.admission_fee:g}*",
        "",
        "*Payment Status: PAID*",
        f"Thank you for choosing *{settings.GYM_NAME}*!",
    ])



def trainer_contract_message(trainer: Trainer) -> str:
    return "\n".join([
        f"*TRAINER CONTRACT - {settings.GYM_NAME}*",
        "",
        "*Trainer Information:*",
        f"• Name: {trainer.name}",
        f"• Trainer ID: {trainer.unique_id}",
        f"• Phone: {trainer.phone_number}",
        f"• Email: {trainer.email or 'Not provided'}",
        "",
        "*Employment Details:*",
        f"• Joining Date: {trainer.joining_date.strftime('%d/%m/%Y')}",
        f"• Specialization: {trainer.specialization}",
        f"• Experience: {trainer.experience:g} year(s)",
        f"• Monthly Salary: ₹{trainer.salary:g}",
        "",
        "*Status: ACTIVE TRAINER*",
        f"Welcome to the {settings.GYM_NAME} family!",
    ])


def workout_share_message(trainee_name: str, days: List[WorkoutDay]) -> str:
    lines = [f"*Workout Plan for {trainee_name}*", ""]
    for day_index, day in enumerate(days, start=1):
        lines.append(f"*Day {day_index}: {day.name}*")
        for exercise_index, exercise in enumerate(day.exercises, start=1):
            lines.append(f"{exercise_index}. {exercise.name}")
            lines.append(f"   Sets: {exercise.sets} | Reps: {exercise.reps}")
            if exercise.notes:
                lines.append(f"   Notes: {exercise.notes}")
            lines.append("")
        if day.notes:
            lines.append(f"Day Notes: {day.notes}")
        lines.extend(["", "---", ""])
    lines.append("Stay consistent and achieve your goals!")
    return "\n".join(lines)


def diet_share_message(trainee_name: str, days: List[DietDay]) -> str:
    lines = [f"*Diet Plan for {trainee_name}*", ""]
    for day in days:
        lines.append(f"*{day.day_name}*")
        for meal in day.meals:
            lines.append("")
            lines.append(f"*{meal.type.value}*: {meal.name}")
            for item in meal.food_items:
                lines.append(f"• {item.name} ({item.quantity})" if item.quantity else f"• {item.name}")
            if meal.notes:
                lines.append(f"Notes: {meal.notes}")
        lines.extend(["", "---", ""])
    lines.append("Follow your diet plan consistently for best results!")
    return "\n".join(lines)
