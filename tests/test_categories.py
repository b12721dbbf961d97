from jobboard.core.enums import Role


def test_create_and_list_categories(client, make_user, auth_headers):
    hr = make_user(role=Role.HR)
    headers = auth_headers(hr)

    response = client.post("/api/categories", headers=headers, json={"name": "  Healthcare "})
    assert response.status_code == 201
    created = response.json()["data"]
    assert created["name"] == "Healthcare"

    client.post("/api/categories", headers=headers, json={"name": "Accounting"})

    listed = client.get("/api/categories").json()["data"]
    assert [c["name"] for c in listed] == ["Accounting", "Healthcare"]
    assert listed[0]["skillsCount"] == 0
    assert listed[0]["jobsCount"] == 0


def test_duplicate_name_conflicts(client, make_user, make_category, auth_headers):
    make_category(name="Engineering")
    admin = make_user(role=Role.ADMIN)

    response = client.post("/api/categories", headers=auth_headers(admin), json={"name": "Engineering"})
    assert response.status_code == 409
    assert response.json() == {
        "ok": False,
        "error": {"code": "CONFLICT", "message": "Category name must be unique"},
    }


def test_rename_to_existing_name_conflicts(client, make_user, make_category, auth_headers):
    make_category(name="Engineering")
    design = make_category(name="Design")
    admin = make_user(role=Role.ADMIN)

    response = client.patch(
        f"/api/categories/{design['id']}", headers=auth_headers(admin), json={"name": "Engineering"}
    )
    assert response.status_code == 409


def test_applicants_cannot_manage_categories(client, make_user, auth_headers):
    applicant = make_user()
    response = client.post("/api/categories", headers=auth_headers(applicant), json={"name": "Nursing"})
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_name_is_validated(client, make_user, auth_headers):
    admin = make_user(role=Role.ADMIN)
    response = client.post("/api/categories", headers=auth_headers(admin), json={"name": "x"})
    assert response.status_code == 400
    assert "name" in response.json()["error"]["details"]["fieldErrors"]


def test_with_skills_and_counts(client, make_category, make_job):
    category = make_category(name="Engineering", skills=["Python", "Go"])
    make_job(category["id"])

    listed = client.get("/api/categories", params={"withSkills": "1"}).json()["data"]
    assert sorted(s["name"] for s in listed[0]["skills"]) == ["Go", "Python"]

    detail = client.get(f"/api/categories/{category['id']}").json()["data"]
    assert detail["skillsCount"] == 2
    assert detail["jobsCount"] == 1


def test_delete_category_in_use(client, make_user, make_category, make_job, auth_headers):
    used = make_category(name="Engineering")
    unused = make_category(name="Design")
    make_job(used["id"])
    headers = auth_headers(make_user(role=Role.ADMIN))

    blocked = client.delete(f"/api/categories/{used['id']}", headers=headers)
    assert blocked.status_code == 400

    assert client.delete(f"/api/categories/{unused['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/categories/{unused['id']}").status_code == 404
