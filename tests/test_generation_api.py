from fastapi.testclient import TestClient

from realtor_genai.api.app import Services, create_app
from realtor_genai.copywriting.generator import CopyGenerator

from conftest import FakeCompletionClient


SOCIAL_PAYLOAD = {
    "propertyAddress": "12 Harbor Lane",
    "listingPrice": "$850,000",
    "propertyType": "single-family home",
    "bedrooms": 4,
    "bathrooms": "3",
    "platform": "Instagram",
    "tone": "upbeat",
    "callToAction": "DM to book a tour",
}


def test_social_post_returns_three_trimmed_variations(client, completions):
    response = client.post("/api/openai/generate-social-post", json=SOCIAL_PAYLOAD)

    assert response.status_code == 200
    variations = response.json()["variations"]
    assert variations == ["variation 1", "variation 2", "variation 3"]
    assert all(v and v == v.strip() for v in variations)


def test_social_post_uses_rising_temperatures_in_order(client, completions):
    client.post("/api/openai/generate-social-post", json=SOCIAL_PAYLOAD)

    assert [c["temperature"] for c in completions.calls] == [0.7, 0.8, 0.9]
    assert {c["max_tokens"] for c in completions.calls} == {800}
    prompts = {c["prompt"] for c in completions.calls}
    assert len(prompts) == 1


def test_social_post_stops_at_first_failure():
    failing = FakeCompletionClient(fail_on=1)
    client = TestClient(create_app(services=Services(copywriter=CopyGenerator(failing))))

    response = client.post("/api/openai/generate-social-post", json=SOCIAL_PAYLOAD)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate social media post"}
    assert len(failing.calls) == 2


def test_first_call_failure_makes_no_further_calls():
    failing = FakeCompletionClient(fail_on=0)
    client = TestClient(create_app(services=Services(copywriter=CopyGenerator(failing))))

    response = client.post("/api/openai/generate-listing", json={"propertyType": "condo"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate listing"}
    assert len(failing.calls) == 1


def test_empty_payload_still_generates(client, completions):
    response = client.post("/api/openai/generate-social-post", json={})

    assert response.status_code == 200
    assert len(response.json()["variations"]) == 3
    user_prompt = completions.calls[0]["prompt"].user
    assert "Property details:" not in user_prompt


def test_listing_route_returns_three_variations(client, completions):
    response = client.post(
        "/api/openai/generate-listing",
        json={"propertyType": "condo", "bedrooms": "2", "features": "rooftop deck", "tone": "luxury"},
    )

    assert response.status_code == 200
    assert len(response.json()["variations"]) == 3
    assert "rooftop deck" in completions.calls[0]["prompt"].user


def test_broadcast_email_returns_three_variations(client, completions):
    response = client.post(
        "/api/openai/generate-email",
        json={"emailType": "broadcast", "broadcastPurpose": "just-sold", "subject": "Sold in 5 days"},
    )

    assert response.status_code == 200
    assert len(response.json()["variations"]) == 3
    assert [c["temperature"] for c in completions.calls] == [0.7, 0.8, 0.9]


def test_follow_up_email_is_a_single_longer_completion(client, completions):
    response = client.post(
        "/api/openai/generate-email",
        json={"emailType": "follow-up", "numberOfEmails": "4", "followUpSequenceType": "open-house"},
    )

    assert response.status_code == 200
    assert response.json() == {"variations": ["variation 1"]}
    assert len(completions.calls) == 1
    assert completions.calls[0]["max_tokens"] == 1600
    assert "(4 emails)" in completions.calls[0]["prompt"].user


def test_email_failure_message():
    failing = FakeCompletionClient(fail_on=2)
    client = TestClient(create_app(services=Services(copywriter=CopyGenerator(failing))))

    response = client.post("/api/openai/generate-email", json={"emailType": "transactional"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate email"}
    assert len(failing.calls) == 3


def test_generation_without_openai_key_is_reported():
    client = TestClient(create_app(services=Services()))

    response = client.post("/api/openai/generate-social-post", json=SOCIAL_PAYLOAD)

    assert response.status_code == 500
    assert response.json() == {"error": "OPENAI_API_KEY is not set"}
