"""
Institution registration, verification, and the coordinator's student roster.
"""
import pytest

from tests.conftest import profile_payload


def institution_payload(**overrides):
    payload = {
        "coordinatorName": "Priya Sharma",
        "coordinatorEmail": "placements@cbit.ac.in",
        "institutionName": "Chaitanya Bharathi Institute of Technology",
        "institutionAddress": "Gandipet",
        "institutionCity": "Hyderabad",
        "institutionState": "Telangana",
        "placementOfficers": [
            {"name": "Ravi Kumar", "email": "ravi@cbit.ac.in", "designation": "TPO"},
            {"name": "", "email": "incomplete@cbit.ac.in"},
        ],
        "studentData": [{"name": "Ananya Rao", "email": "user_1@cbit.ac.in"}],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def institution_id(client):
    response = client.post("/institutions/register", json=institution_payload())
    assert response.status_code == 201, response.text
    return response.json()["institutionId"]


# ============================================================
# REGISTRATION
# ============================================================

def test_register_institution(client, institution_id):
    institution = client.get(f"/institutions/{institution_id}").json()

    assert institution["isApproved"] is True
    emails = [c["email"] for c in institution["coordinators"]]
    assert emails == ["placements@cbit.ac.in", "ravi@cbit.ac.in"]
    assert institution["coordinators"][0]["isMainCoordinator"] is True


def test_duplicate_name_and_city_conflicts(client, institution_id):
    response = client.post("/institutions/register", json=institution_payload())

    assert response.status_code == 409
    assert response.json()["message"] == "Institution with this name and city already exists"


def test_same_name_other_city_allowed(client, institution_id):
    response = client.post(
        "/institutions/register", json=institution_payload(institutionCity="Warangal")
    )

    assert response.status_code == 201


def test_list_institutions(client, institution_id):
    response = client.get("/institutions")

    assert [i["_id"] for i in response.json()] == [institution_id]


def test_get_missing_institution_404(client):
    assert client.get("/institutions/5f1d7f3e9b1e8a3f4c2d1a0b").status_code == 404


# ============================================================
# VERIFICATION
# ============================================================

def test_verify_coordinator(client, institution_id):
    response = client.post("/institutions/verify-coordinator", json={"email": "ravi@cbit.ac.in"})

    assert response.status_code == 200
    body = response.json()
    assert body["isCoordinator"] is True
    assert body["institution"]["id"] == institution_id
    assert body["coordinatorInfo"]["designation"] == "TPO"


def test_verify_unknown_coordinator_404(client, institution_id):
    response = client.post("/institutions/verify-coordinator", json={"email": "nobody@cbit.ac.in"})

    assert response.status_code == 404


def test_verify_listed_student(client, institution_id):
    response = client.post(
        "/institutions/verify-student",
        json={"email": "user_1@cbit.ac.in", "institutionId": institution_id},
    )

    assert response.json()["isAuthorized"] is True


def test_verify_unlisted_student(client, institution_id):
    response = client.post(
        "/institutions/verify-student",
        json={"email": "stranger@gmail.com", "institutionId": institution_id},
    )

    assert response.json() == {"isAuthorized": False, "institution": None}


def test_allow_all_students(client):
    institution_id = client.post(
        "/institutions/register", json=institution_payload(allowAllStudents=True, studentData=[])
    ).json()["institutionId"]

    response = client.post(
        "/institutions/verify-student",
        json={"email": "anyone@gmail.com", "institutionId": institution_id},
    )

    assert response.json()["isAuthorized"] is True


# ============================================================
# STUDENT ROSTER
# ============================================================

def manual_student(**overrides):
    payload = {
        "name": "Kiran Reddy",
        "email": "kiran@cbit.ac.in",
        "rollNumber": "160121733099",
        "branch": "Computer Science",
        "semester": "5",
        "cgpa": 7.8,
    }
    payload.update(overrides)
    return payload


def test_add_manual_student(client, db, institution_id):
    response = client.post("/coordinator/students", json=manual_student(institutionId=institution_id))

    assert response.status_code == 201
    student = response.json()["student"]
    assert student["name"] == "Kiran Reddy"
    stored = db.userprofiles.find_one({"rollNumber": "160121733099"})
    assert stored["clerkUserId"].startswith("manual_160121733099_")
    assert stored["isManualEntry"] is True
    assert stored["isOnboardingComplete"] is False
    assert stored["collegeName"] == "Chaitanya Bharathi Institute of Technology"


def test_manual_student_roll_number_conflict(client, create_profile):
    create_profile(roll_number="160121733099")

    response = client.post("/coordinator/students", json=manual_student())

    assert response.status_code == 409
    assert response.json()["field"] == "rollNumber"


def test_roster_match_types(client, db, institution_id):
    client.post("/coordinator/students", json=manual_student(institutionId=institution_id))
    client.post("/users/profile", json=profile_payload())
    client.post(
        "/users/profile",
        json=profile_payload(
            clerk_user_id="user_2", roll_number="R2", collegeName="chaitanya bharathi institute of technology"
        ),
    )
    client.post(
        "/users/profile",
        json=profile_payload(clerk_user_id="user_3", roll_number="R3", collegeName="Osmania University"),
    )

    students = client.get(f"/coordinator/students/{institution_id}").json()

    match_types = {s["rollNumber"]: s["matchType"] for s in students}
    assert match_types == {
        "160121733099": "direct",
        "160121733001": "collegeName",
        "R2": "inferred",
    }


def test_coordinator_edits_student(client, db, institution_id):
    client.post("/coordinator/students", json=manual_student(institutionId=institution_id))
    student_id = str(db.userprofiles.find_one({"rollNumber": "160121733099"})["_id"])

    response = client.put(f"/coordinator/students/{student_id}", json={"cgpa": 8.4, "backlogs": 1})

    assert response.status_code == 200
    assert response.json()["student"]["cgpa"] == 8.4
    assert response.json()["student"]["backlogs"] == 1


def test_coordinator_edit_rejects_bad_resume_link(client, db, institution_id):
    client.post("/coordinator/students", json=manual_student(institutionId=institution_id))
    student_id = str(db.userprofiles.find_one({"rollNumber": "160121733099"})["_id"])

    response = client.put(
        f"/coordinator/students/{student_id}", json={"resumeUrl": "https://example.com/cv.pdf"}
    )

    assert response.status_code == 400


def test_edit_missing_student_404(client):
    response = client.put("/coordinator/students/5f1d7f3e9b1e8a3f4c2d1a0b", json={"cgpa": 8.0})

    assert response.status_code == 404


def test_officer_email_case_matches_verification(client):
    officers = [{"name": "Ravi Kumar", "email": "TPO@CBIT.ac.in", "designation": "TPO"}]
    client.post("/institutions/register", json=institution_payload(placementOfficers=officers))

    response = client.post("/institutions/verify-coordinator", json={"email": "TPO@CBIT.ac.in"})

    assert response.status_code == 200
    assert response.json()["coordinatorInfo"]["designation"] == "TPO"


def test_blank_officer_rows_are_skipped(client):
    officers = [{"name": "", "email": ""}]

    response = client.post("/institutions/register", json=institution_payload(placementOfficers=officers))

    assert response.status_code == 201
