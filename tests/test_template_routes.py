def create_template(client, headers, name="5x5"):
    resp = client.post("/api/templates", json={"name": name}, headers=headers)
    assert resp.status_code == 201
    return resp.get_json()["template"]


def test_create_list_and_get(client, auth, exercises):
    _, headers = auth
    template = create_template(client, headers)

    resp = client.post(
        f"/api/templates/{template['id']}/exercises",
        json={"exercise_id": exercises["Back Squat"], "target_sets": 5, "target_reps": 5},
        headers=headers,
    )
    assert resp.status_code == 201
    assert resp.get_json()["exercise"]["exercise_name"] == "Back Squat"

    listed = client.get("/api/templates", headers=headers).get_json()["templates"]
    assert [t["id"] for t in listed] == [template["id"]]

    body = client.get(f"/api/templates/{template['id']}", headers=headers).get_json()
    assert body["template"]["name"] == "5x5"
    assert [e["target_reps"] for e in body["exercises"]] == [5]


def test_create_requires_name(client, auth):
    _, headers = auth
    assert client.post("/api/templates", json={}, headers=headers).status_code == 400


def test_replace_exercises(client, auth, exercises):
    _, headers = auth
    template = create_template(client, headers)
    url = f"/api/templates/{template['id']}/exercises"
    client.post(
        url,
        json={"exercise_id": exercises["Back Squat"], "target_sets": 5, "target_reps": 5},
        headers=headers,
    )

    resp = client.put(
        url,
        json={
            "exercises": [
                {"exercise_id": exercises["Bench Press"], "order_index": 0, "target_sets": 3, "target_reps": 8, "target_weight_kg": 60},
                {"exercise_id": exercises["Back Squat"], "order_index": 1, "target_sets": 3, "target_reps": 10},
            ]
        },
        headers=headers,
    )
    assert resp.status_code == 200

    body = client.get(f"/api/templates/{template['id']}", headers=headers).get_json()
    assert [(e["exercise_name"], e["target_reps"]) for e in body["exercises"]] == [
        ("Bench Press", 8),
        ("Back Squat", 10),
    ]


def test_invalid_replacement_leaves_list_untouched(client, auth, exercises):
    _, headers = auth
    template = create_template(client, headers)
    url = f"/api/templates/{template['id']}/exercises"
    client.post(
        url,
        json={"exercise_id": exercises["Back Squat"], "target_sets": 5, "target_reps": 5},
        headers=headers,
    )

    bad_entry = client.put(
        url,
        json={"exercises": [{"exercise_id": exercises["Bench Press"], "target_sets": 3}]},
        headers=headers,
    )
    unknown_exercise = client.put(
        url,
        json={"exercises": [{"exercise_id": 9999, "target_sets": 3, "target_reps": 5}]},
        headers=headers,
    )
    assert bad_entry.status_code == 400
    assert unknown_exercise.status_code == 404

    body = client.get(f"/api/templates/{template['id']}", headers=headers).get_json()
    assert [e["exercise_name"] for e in body["exercises"]] == ["Back Squat"]


def test_other_users_template_is_hidden(client, register):
    _, alice = register("alice")
    _, bob = register("bob")
    template = create_template(client, alice)
    assert client.get(f"/api/templates/{template['id']}", headers=bob).status_code == 404
    assert client.put(
        f"/api/templates/{template['id']}/exercises", json={"exercises": []}, headers=bob
    ).status_code == 404


def test_start_workout_from_template(client, auth):
    _, headers = auth
    template = create_template(client, headers, name="Push A")
    resp = client.post("/api/workouts", json={"template_id": template["id"]}, headers=headers)
    assert resp.status_code == 201
    workout = resp.get_json()["workout"]
    assert workout["template_id"] == template["id"]
    assert workout["name"] == "Push A"
