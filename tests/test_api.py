from datetime import date

from sqlalchemy.exc import OperationalError
from sqlmodel import select

from gymdesk.crud import trainee as trainee_crud
from gymdesk.models.attendance import AttendanceRecord, TrainerAttendanceRecord
from gymdesk.models.plan import DietPlan, WorkoutPlan
from gymdesk.models.trainee import Trainee
from gymdesk.services import attendance

WORKOUT_DAYS = [
    {"name": "Push", "exercises": [{"name": "Bench Press", "sets": 4, "reps": "8-10"}]},
    {"name": "Pull", "exercises": [{"name": "Rows", "sets": 3, "reps": 12}]},
]
DIET_DAYS = [
    {"day_number": 1, "day_name": "Day 1", "meals": [
        {"type": "Breakfast", "name": "Oats", "food_items": [{"name": "Oats", "quantity": "50g"}]},
    ]},
]


def create_trainee(client, **overrides):
    data = {"name": "Anita Sharma", "phone_number": "9876543210", "membership_duration": 3}
    data.update(overrides)
    response = client.post("/api/v1/trainees/", json=data)
    assert response.status_code == 201, response.text
    return response.json()


def test_root(client):
    assert client.get("/").json() == {"message": "Welcome to GymDesk API"}


def test_create_trainee_defaults(client):
    body = create_trainee(client)
    assert body["member_id"] == "9876543210"
    assert body["status"] == "active"
    assert body["is_active"] is True


def test_create_trainee_rejections(client):
    create_trainee(client, member_id="IF0001")

    duplicate = client.post("/api/v1/trainees/", json={
        "name": "Other", "phone_number": "9876543210", "membership_duration": 1,
    })
    assert duplicate.status_code == 409

    bad_phone = client.post("/api/v1/trainees/", json={
        "name": "Other", "phone_number": "12345", "membership_duration": 1,
    })
    assert bad_phone.status_code == 400

    bad_duration = client.post("/api/v1/trainees/", json={
        "name": "Other", "phone_number": "9000000000", "membership_duration": 2,
    })
    assert bad_duration.status_code == 400


def test_archive_moves_trainee_between_partitions(client):
    trainee = create_trainee(client)

    archived = client.post(f"/api/v1/trainees/{trainee['id']}/archive").json()
    assert archived["is_active"] is False and archived["archived_at"]
    assert client.get("/api/v1/trainees/").json() == []
    assert [t["id"] for t in client.get("/api/v1/trainees/", params={"archived": True}).json()] == [trainee["id"]]

    client.post(f"/api/v1/trainees/{trainee['id']}/unarchive")
    assert [t["id"] for t in client.get("/api/v1/trainees/").json()] == [trainee["id"]]
    assert client.get("/api/v1/trainees/", params={"archived": True}).json() == []


def test_search_trainees(client):
    create_trainee(client, name="Anita Sharma", phone_number="9876543210")
    create_trainee(client, name="Rahul Verma", phone_number="9123456780")

    names = [t["name"] for t in client.get("/api/v1/trainees/", params={"search": "rahul"}).json()]
    assert names == ["Rahul Verma"]
    names = [t["name"] for t in client.get("/api/v1/trainees/", params={"search": "98765"}).json()]
    assert names == ["Anita Sharma"]


def test_immutable_phone_via_api(client):
    trainee = create_trainee(client)
    response = client.patch(f"/api/v1/trainees/{trainee['id']}", json={"phone_number": "9000000000"})
    assert response.status_code == 400


def test_missing_trainee_is_404(client):
    assert client.get("/api/v1/trainees/999").status_code == 404
    assert client.delete("/api/v1/trainees/999").status_code == 404
    assert client.post("/api/v1/trainees/999/archive").status_code == 404


def test_trainee_delete_removes_attendance_and_plans(client, session):
    trainee = create_trainee(client)
    tid = trainee["id"]
    attendance.mark_trainee_attendance(session, tid, date.today(), True)
    assert client.post("/api/v1/workout-plans/", json={"trainee_id": tid, "days": WORKOUT_DAYS}).status_code == 201
    assert client.post("/api/v1/diet-plans/", json={"trainee_id": tid, "days": DIET_DAYS}).status_code == 201

    assert client.delete(f"/api/v1/trainees/{tid}").status_code == 200

    assert session.get(Trainee, tid) is None
    assert session.exec(select(AttendanceRecord).where(AttendanceRecord.trainee_id == tid)).all() == []
    assert session.exec(select(WorkoutPlan)).all() == []
    assert session.exec(select(DietPlan)).all() == []


def test_trainer_lifecycle(client):
    created = client.post("/api/v1/trainers/", json={
        "name": "Ravi Kumar", "phone_number": "9876512345", "email": "", "specialization": "Yoga",
    })
    assert created.status_code == 201
    trainer = created.json()
    assert trainer["unique_id"] == "TR512345"
    assert trainer["email"] is None

    duplicate = client.post("/api/v1/trainers/", json={"name": "Other", "phone_number": "9876512345"})
    assert duplicate.status_code == 409

    found = client.get("/api/v1/trainers/", params={"search": "yoga"}).json()
    assert [t["id"] for t in found] == [trainer["id"]]

    client.post(f"/api/v1/trainers/{trainer['id']}/archive")
    assert client.get("/api/v1/trainers/").json() == []
    assert len(client.get("/api/v1/trainers/", params={"archived": True}).json()) == 1


def test_trainer_delete_leaves_no_orphans(client, session, make_trainer):
    trainer = make_trainer()
    attendance.check_in(session, trainer.id, date.today())
    trainee = create_trainee(client, special_training=True, assigned_trainer_id=trainer.id)
    trainer_id = trainer.id

    response = client.delete(f"/api/v1/trainers/{trainer_id}")
    assert response.json() == {"message": "Trainer deleted successfully", "attendance_records_deleted": 1}

    remaining = session.exec(
        select(TrainerAttendanceRecord).where(TrainerAttendanceRecord.trainer_id == trainer_id)
    ).all()
    assert remaining == []
    assert session.get(Trainee, trainee["id"]).assigned_trainer_id is None


def test_one_plan_per_trainee(client):
    tid = create_trainee(client)["id"]
    first = client.post("/api/v1/workout-plans/", json={"trainee_id": tid, "days": WORKOUT_DAYS})
    assert first.status_code == 201
    second = client.post("/api/v1/workout-plans/", json={"trainee_id": tid, "days": WORKOUT_DAYS})
    assert second.status_code == 409
    assert second.json()["detail"] == "Workout plan already exists for Anita Sharma"


def test_plan_save_rejects_empty_day(client):
    tid = create_trainee(client)["id"]
    days = WORKOUT_DAYS + [{"name": "Legs", "exercises": []}]
    response = client.post("/api/v1/workout-plans/", json={"trainee_id": tid, "days": days})
    assert response.status_code == 400
    assert "Legs" in response.json()["detail"]


def test_plan_ids_survive_replace_and_patch(client):
    tid = create_trainee(client)["id"]
    plan = client.post("/api/v1/workout-plans/", json={"trainee_id": tid, "days": WORKOUT_DAYS}).json()
    push, pull = plan["days"]
    assert push["exercises"][0]["id"] and pull["exercises"][0]["reps"] == "12"

    patched = client.patch(
        f"/api/v1/workout-plans/{plan['id']}/days/{pull['id']}/exercises/{pull['exercises'][0]['id']}",
        json={"sets": 5},
    ).json()
    assert patched["days"][1]["exercises"][0]["sets"] == 5
    assert patched["days"][0] == push

    days = patched["days"]
    days[0]["name"] = "Chest"
    replaced = client.put(f"/api/v1/workout-plans/{plan['id']}", json={"days": days}).json()
    assert [d["id"] for d in replaced["days"]] == [push["id"], pull["id"]]
    assert replaced["days"][0]["name"] == "Chest"

    missing = client.patch(
        f"/api/v1/workout-plans/{plan['id']}/days/{pull['id']}/exercises/exercise-nope", json={"sets": 5}
    )
    assert missing.status_code == 404


def test_diet_meal_patch(client):
    tid = create_trainee(client)["id"]
    plan = client.post("/api/v1/diet-plans/", json={"trainee_id": tid, "days": DIET_DAYS}).json()
    day = plan["days"][0]
    meal = day["meals"][0]

    patched = client.patch(
        f"/api/v1/diet-plans/{plan['id']}/days/{day['id']}/meals/{meal['id']}",
        json={"name": "Overnight oats"},
    ).json()
    assert patched["days"][0]["meals"][0]["name"] == "Overnight oats"
    assert patched["days"][0]["meals"][0]["food_items"] == meal["food_items"]


def test_drafts(client):
    draft = client.post("/api/v1/workout-plans/drafts", json={"number_of_days": 2}).json()
    assert [d["name"] for d in draft] == ["Push", "Pull"]

    draft[0]["exercises"] = [{"name": "Bench Press"}]
    resized = client.post("/api/v1/workout-plans/drafts/resize", json={"days": draft, "number_of_days": 3}).json()
    assert resized[0]["exercises"][0]["name"] == "Bench Press"
    assert resized[0]["id"] == draft[0]["id"]
    assert resized[2]["name"] == "Legs"

    too_many = client.post("/api/v1/diet-plans/drafts", json={"number_of_days": 8})
    assert too_many.status_code == 422


def test_rename_and_archive_follow_into_plans(client):
    tid = create_trainee(client)["id"]
    plan = client.post("/api/v1/workout-plans/", json={"trainee_id": tid, "days": WORKOUT_DAYS}).json()

    client.patch(f"/api/v1/trainees/{tid}", json={"name": "Anita S"})
    assert client.get(f"/api/v1/workout-plans/{plan['id']}").json()["trainee_name"] == "Anita S"

    client.post(f"/api/v1/trainees/{tid}/archive")
    assert client.get("/api/v1/workout-plans/").json() == []
    archived = client.get("/api/v1/workout-plans/", params={"archived": True}).json()
    assert [p["id"] for p in archived] == [plan["id"]]


def test_share_links(client):
    tid = create_trainee(client)["id"]
    workout = client.post("/api/v1/workout-plans/", json={"trainee_id": tid, "days": WORKOUT_DAYS}).json()
    diet = client.post("/api/v1/diet-plans/", json={"trainee_id": tid, "days": DIET_DAYS}).json()

    shared = client.get(f"/api/v1/workout-plans/{workout['id']}/share").json()
    assert shared["phone"] == "919876543210"
    assert shared["message"].startswith("*Workout Plan for Anita Sharma*")
    assert shared["url"].startswith("https://wa.me/919876543210?text=")

    shared = client.get(f"/api/v1/diet-plans/{diet['id']}/share").json()
    assert "*Breakfast*: Oats" in shared["message"]


def test_invoice(client):
    trainee = create_trainee(client, admission_fee=4500, member_id="IF0042")
    invoice = client.get(f"/api/v1/trainees/{trainee['id']}/invoice").json()
    assert invoice["phone"] == "919876543210"
    assert "• Member ID: IF0042" in invoice["message"]
    assert "*₹4500*" in invoice["message"]


def test_store_failure_is_reported_generically(client, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(trainee_crud, "get_trainees", broken)
    response = client.get("/api/v1/trainees/")
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to load trainees. Please try again."


def test_store_failure_on_write(client, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(trainee_crud, "create_trainee", broken)
    response = client.post("/api/v1/trainees/", json={
        "name": "Anita", "phone_number": "9876543210", "membership_duration": 1,
    })
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to add trainee. Please try again."


def test_demo_data(session):
    from create_demo_data import create_demo_data

    trainer, trainee, plan = create_demo_data(session)
    assert trainee.assigned_trainer_id == trainer.id
    assert plan.trainee_id == trainee.id
    assert len(plan.days) == 2


def test_null_node_edit_leaves_plan_readable(client):
    tid = create_trainee(client)["id"]
    plan = client.post("/api/v1/workout-plans/", json={"trainee_id": tid, "days": WORKOUT_DAYS}).json()
    push = plan["days"][0]
    url = f"/api/v1/workout-plans/{plan['id']}/days/{push['id']}/exercises/{push['exercises'][0]['id']}"

    response = client.patch(url, json={"sets": None})
    assert response.status_code == 400

    stored = client.get(f"/api/v1/workout-plans/{plan['id']}")
    assert stored.status_code == 200
    assert stored.json()["days"] == plan["days"]
    assert client.get(f"/api/v1/workout-plans/{plan['id']}/share").status_code == 200
    assert client.patch(url, json={"sets": 2}).json()["days"][0]["exercises"][0]["sets"] == 2


def test_null_meal_type_rejected(client):
    tid = create_trainee(client)["id"]
    plan = client.post("/api/v1/diet-plans/", json={"trainee_id": tid, "days": DIET_DAYS}).json()
    day = plan["days"][0]
    url = f"/api/v1/diet-plans/{plan['id']}/days/{day['id']}/meals/{day['meals'][0]['id']}"

    assert client.patch(url, json={"type": None}).status_code == 400
    assert client.get(f"/api/v1/diet-plans/{plan['id']}").json()["days"] == plan["days"]


def test_null_trainee_fields_are_validation_errors(client):
    trainee = create_trainee(client)
    response = client.patch(f"/api/v1/trainees/{trainee['id']}", json={"name": None})
    assert response.status_code == 400
    assert response.json()["detail"] == "These fields cannot be empty: name"

    response = client.patch(f"/api/v1/trainees/{trainee['id']}", json={"goal_category": None})
    assert response.status_code == 400
    assert client.get(f"/api/v1/trainees/{trainee['id']}").json()["name"] == "Anita Sharma"


def test_null_trainer_fields_are_validation_errors(client, make_trainer):
    trainer = make_trainer(email="ravi@example.com")
    response = client.patch(f"/api/v1/trainers/{trainer.id}", json={"salary": None})
    assert response.status_code == 400

    cleared = client.patch(f"/api/v1/trainers/{trainer.id}", json={"email": None})
    assert cleared.status_code == 200
    assert cleared.json()["email"] is None


def test_trainer_contract(client, make_trainer):
    trainer = make_trainer(name="Ravi Kumar", email="", specialization="Yoga", salary=22000)
    contract = client.get(f"/api/v1/trainers/{trainer.id}/contract").json()

    assert contract["phone"] == f"91{trainer.phone_number}"
    assert contract["url"].startswith(f"https://wa.me/91{trainer.phone_number}?text=")
    assert f"• Trainer ID: {trainer.unique_id}" in contract["message"]
    assert "• Email: Not provided" in contract["message"]
    assert "• Monthly Salary: ₹22000" in contract["message"]

    assert client.get("/api/v1/trainers/999/contract").status_code == 404
