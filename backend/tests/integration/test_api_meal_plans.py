"""
Integration tests for meal plan endpoints.
"""

import pytest


class TestMealPlanEndpoints:

    @pytest.mark.integration
    def test_active_plan_none(self, client, override_db, test_user_id):
        response = client.get("/api/meal-plans/active", params={"user_id": test_user_id})

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.integration
    def test_create_plan(self, client, override_db, test_user_id):
        response = client.post(
            "/api/meal-plans",
            params={"user_id": test_user_id},
            json={"name": "Spring", "start_date": "2025-03-03"},
        )

        assert response.status_code == 200
        assert response.json()["end_date"] == "2025-03-09"

    @pytest.mark.integration
    def test_create_plan_blank_name(self, client, override_db, test_user_id):
        response = client.post(
            "/api/meal-plans", params={"user_id": test_user_id}, json={"name": ""}
        )
        assert response.status_code == 400

    @pytest.mark.integration
    def test_week_view(self, client, override_db, test_user_id, sample_meal_plan, sample_entries):
        override_db.respond("meal_plans", "select", [sample_meal_plan])
        override_db.respond("meal_plan_entries", "select", sample_entries)

        response = client.get("/api/meal-plans/week", params={"user_id": test_user_id})

        assert response.status_code == 200
        data = response.json()
        assert data["entry_count"] == 3
        assert len(data["days"]) == 7
        assert data["days"][0]["meals"]["dinner"][0]["recipe_title"] == "Soup"

    @pytest.mark.integration
    def test_todays_meals(self, client, override_db, test_user_id, sample_entries):
        override_db.respond("meal_plan_entries", "select", sample_entries[1:])

        response = client.get(
            "/api/meal-plans/today", params={"user_id": test_user_id, "day": "2025-03-05"}
        )

        assert response.status_code == 200
        assert [e["meal_type"] for e in response.json()] == ["breakfast", "lunch"]

    @pytest.mark.integration
    def test_entries_of_foreign_plan(self, client, override_db, test_user_id):
        response = client.get("/api/meal-plans/other-plan/entries", params={"user_id": test_user_id})
        assert response.status_code == 404

    @pytest.mark.integration
    def test_add_entry(self, client, override_db, test_user_id, sample_meal_plan):
        override_db.respond("meal_plans", "select", [sample_meal_plan])

        response = client.post(
            "/api/meal-plans/entries",
            params={"user_id": test_user_id},
            json={
                "meal_plan_id": "plan-uuid",
                "meal_date": "2025-03-04",
                "meal_type": "dinner",
                "recipe_id": "recipe-soup",
                "servings": 2,
            },
        )

        assert response.status_code == 200
        assert response.json()["servings"] == 2

    @pytest.mark.integration
    def test_add_entry_outside_plan(self, client, override_db, test_user_id, sample_meal_plan):
        override_db.respond("meal_plans", "select", [sample_meal_plan])

        response = client.post(
            "/api/meal-plans/entries",
            params={"user_id": test_user_id},
            json={
                "meal_plan_id": "plan-uuid",
                "meal_date": "2025-04-01",
                "meal_type": "dinner",
                "recipe_id": "recipe-soup",
            },
        )

        assert response.status_code == 400

    @pytest.mark.integration
    def test_add_entry_bad_meal_type(self, client, override_db, test_user_id):
        response = client.post(
            "/api/meal-plans/entries",
            params={"user_id": test_user_id},
            json={"meal_date": "2025-03-04", "meal_type": "brunch", "recipe_id": "r"},
        )
        assert response.status_code == 422

    @pytest.mark.integration
    def test_remove_entry(self, client, override_db, test_user_id):
        override_db.respond("meal_plan_entries", "select", [{"id": "entry-1"}])

        response = client.delete("/api/meal-plans/entries/entry-1", params={"user_id": test_user_id})

        assert response.status_code == 200
        assert response.json()["deleted"] == "entry-1"
