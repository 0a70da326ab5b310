from datetime import datetime
from urllib.parse import unquote

from gymdesk.models.trainee import GoalCategory, PaymentType, Trainee
from gymdesk.models.trainer import Trainer
from gymdesk.schemas.plan import DietDay, Exercise, FoodItem, Meal, MealType, WorkoutDay
from gymdesk.services import messaging


def test_local_numbers_get_country_code():
    assert messaging.whatsapp_digits("98765 43210") == "919876543210"
    assert messaging.whatsapp_digits("+91 98765-43210") == "919876543210"


def test_link_encodes_the_whole_message():
    url = messaging.whatsapp_link("9876543210", "Hi & bye?\nok")
    assert url.startswith("https://wa.me/919876543210?text=")
    text = url.split("text=", 1)[1]
    assert "&" not in text and "\n" not in text and " " not in text
    assert unquote(text) == "Hi & bye?\nok"


def test_expiry_reminder_text():
    message = messaging.expiry_reminder("Anita", datetime(2025, 3, 14, 18, 0))
    assert message == "Hello Anita, your membership plan will expire on 14/03/2025. Please renew."


def test_invoice_lists_member_and_amount():
    trainee = Trainee(
        id=1,
        member_id="IF0001",
        name="Anita",
        phone_number="9876543210",
        membership_duration=3,
        membership_start_date=datetime(2025, 1, 5),
        membership_end_date=datetime(2025, 4, 5),
        admission_fee=4500,
        goal_category=GoalCategory.STRENGTH,
        payment_type=PaymentType.ONLINE,
    )
    message = messaging.invoice_message(trainee, invoice_no="INV-1", issued_at=datetime(2025, 1, 5))

    assert "• Invoice No: INV-1" in message
    assert "• Member ID: IF0001" in message
    assert "• Expires: 05/04/2025" in message
    assert "• Total Amount: *₹4500*" in message
    assert "• Special Training: No" in message


def test_workout_share_lists_days_in_order():
    days = [
        WorkoutDay(name="Push", exercises=[Exercise(name="Bench Press", sets=4, reps="8")], notes="Warm up"),
        WorkoutDay(name="Pull", exercises=[Exercise(name="Rows", notes="Slow")]),
    ]
    message = messaging.workout_share_message("Anita", days)

    assert message.startswith("*Workout Plan for Anita*")
    assert message.index("*Day 1: Push*") < message.index("*Day 2: Pull*")
    assert "   Sets: 4 | Reps: 8" in message
    assert "Day Notes: Warm up" in message
    assert "   Notes: Slow" in message


def test_diet_share_lists_meals_and_items():
    days = [DietDay(day_number=1, day_name="Day 1", meals=[
        Meal(type=MealType.BREAKFAST, name="Oats", food_items=[
            FoodItem(name="Oats", quantity="50g"),
            FoodItem(name="Banana"),
        ]),
    ])]
    message = messaging.diet_share_message("Anita", days)

    assert "*Breakfast*: Oats" in message
    assert "• Oats (50g)" in message
    assert "• Banana" in message and "Banana (" not in message


def test_trainer_contract_text():
    trainer = Trainer(
        id=1,
        unique_id="TR512345",
        name="Ravi Kumar",
        phone_number="9876512345",
        specialization="Yoga",
        experience=4,
        salary=22000,
        joining_date=datetime(2024, 11, 2),
    )
    message = messaging.trainer_contract_message(trainer)

    assert message.startswith("*TRAINER CONTRACT - INDOFIT GYM*")
    assert "• Trainer ID: TR512345" in message
    assert "• Email: Not provided" in message
    assert "• Joining Date: 02/11/2024" in message
    assert "• Experience: 4 year(s)" in message
    assert "• Monthly Salary: ₹22000" in message
