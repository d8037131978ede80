import pytest

QUOTE = {"productId": 1, "termYears": 10, "coverageAmount": 50000}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "products": 12, "plans": 48}


def test_premium_quote(client):
    r = client.post("/api/premiumquote", json=QUOTE)
    assert r.status_code == 200
    body = r.json()

    assert body["planCode"] == "HEALTH-001-BASIC"
    assert body["currency"] == "USD"
    options = body["paymentOptions"]
    assert [o["paymentFrequency"] for o in options] == [
        "LumpSum", "Annual", "SemiAnnual", "Quarterly", "Monthly",
    ]

    lump = options[0]
    assert lump["isRecommended"] is True
    assert lump["displayName"] == "Lump Sum (One-time payment)"
    assert lump["grandTotal"] == 4841.0
    assert lump["savingsVsMonthly"] == 1044.0
    assert lump["savingsPercentageVsMonthly"] == 17.74
    assert lump["recommendationReason"].startswith("Best value - Save 17.7%")

    monthly = options[-1]
    assert monthly["numberOfPayments"] == 120
    assert monthly["paymentPerPeriod"] == 45.0
    assert monthly["oneTimeFees"] == 485.0
    assert monthly["isRecommended"] is False


def test_premium_quote_accepts_pascal_case(client):
    body = {
        "ProductId": 1,
        "TermYears": 10,
        "CoverageAmount": 50000,
        "Applicant": {"Age": 40, "Gender": "Male", "HealthStatus": "Good", "OccupationRisk": "Low"},
    }
    r = client.post("/api/premiumquote", json=body)
    assert r.status_code == 200
    monthly = r.json()["paymentOptions"][-1]
    assert monthly["paymentPerPeriod"] == 57.92


def test_premium_quote_single_frequency(client):
    r = client.post("/api/premiumquote", json={**QUOTE, "paymentFrequency": "Monthly"})
    assert r.status_code == 200
    options = r.json()["paymentOptions"]
    assert len(options) == 1
    assert options[0]["paymentFrequency"] == "Monthly"


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"coverageAmount": 49999}, "Coverage amount must be between"),
        ({"coverageAmount": 10000001}, "Coverage amount must be between"),
        ({"termYears": 0}, "Term must be between 1 and 100 years"),
        ({"termYears": 101}, "Term must be between 1 and 100 years"),
        ({"applicant": {"age": 70}}, "Age must be between 18 and 65"),
        ({"paymentFrequency": "weekly"}, "weekly"),
    ],
)
def test_premium_quote_validation(client, overrides, message):
    r = client.post("/api/premiumquote", json={**QUOTE, **overrides})
    assert r.status_code == 400
    assert message in r.json()["error"]


def test_premium_quote_unknown_product(client):
    r = client.post("/api/premiumquote", json={**QUOTE, "productId": 999})
    assert r.status_code == 404
    assert r.json() == {"error": "Product 999 not found or inactive"}


def test_premium_quote_malformed_body(client):
    r = client.post("/api/premiumquote", json={"productId": 1, "coverageAmount": 50000})
    assert r.status_code == 422


def test_compare(client):
    r = client.post("/api/premiumquote/compare", json=QUOTE)
    assert r.status_code == 200
    body = r.json()

    assert body["productInfo"]["planCode"] == "HEALTH-001-BASIC"
    assert body["productInfo"]["termYears"] == 10

    lump, monthly = body["comparison"][0], body["comparison"][-1]
    assert lump["totalPremium"] == "$4,356.00"
    assert lump["grandTotal"] == "$4,841.00"
    assert lump["savings"] == "$1,044.00 (17.7%)"
    assert lump["recommended"] is True
    assert monthly["savings"] == "Baseline"
    assert monthly["paymentAmount"] == "$45.00"


def test_products(client):
    assert len(client.get("/api/products").json()) == 12

    life = client.get("/api/products", params={"type": "Life"}).json()
    assert len(life) == 3
    assert {p["productType"] for p in life} == {"Life"}

    product = client.get("/api/products/1").json()
    assert product["id"] == 1
    assert product["productCode"] == "HEALTH-001"
    assert product["processingFee"] == 45.0

    r = client.get("/api/products/999")
    assert r.status_code == 404


def test_plans_by_product(client):
    plans = client.get("/api/plans/product/1").json()
    assert [p["planCode"] for p in plans] == [
        "HEALTH-001-BASIC",
        "HEALTH-001-STANDARD",
        "HEALTH-001-PREMIUM",
        "HEALTH-001-PLATINUM",
    ]

    r = client.get("/api/plans/product/999")
    assert r.status_code == 404
    assert r.json() == {"error": "No active plans found for product ID 999"}


def test_plan(client):
    plan = client.get("/api/plans/1").json()
    assert plan["planCode"] == "HEALTH-001-BASIC"
    assert plan["basePremiums"]["Monthly"] == 45.0
    assert plan["basePremiums"]["LumpSum"] == 4356.0
    assert plan["benefits"]["accidentalDeathBenefit"] == 25000.0
    assert plan["requiresMedicalExam"] is False

    r = client.get("/api/plans/999")
    assert r.status_code == 404
    assert r.json() == {"error": "Plan with ID 999 not found"}


def test_calculate_plan_premium(client):
    body = {
        "planId": 1,
        "age": 30,
        "gender": "Female",
        "healthStatus": "Excellent",
        "occupationRisk": "Low",
        "paymentFrequency": "Annual",
    }
    r = client.post("/api/plans/calculate", json=body)
    assert r.status_code == 200
    out = r.json()
    assert out["calculatedPremium"] == 380.9
    assert out["basePremiumAnnual"] == 495.0
    assert out["paymentFrequency"] == "Annual"
    assert out["appliedFactors"]["genderFactor"] == 0.95
    assert out["appliedFactors"]["combinedFactor"] == pytest.approx(0.7695)


def test_calculate_plan_premium_defaults(client):
    r = client.post("/api/plans/calculate", json={"planId": 1, "age": 40})
    assert r.status_code == 200
    # Male / Good / Low: 495 * 1.30 * 1.10 * 1.00 * 0.90
    assert r.json()["calculatedPremium"] == 637.07


@pytest.mark.parametrize(
    "body,status",
    [
        ({"planId": 1, "age": 70}, 400),
        ({"planId": 1, "age": 30, "healthStatus": "superb"}, 400),
        ({"planId": 999, "age": 30}, 404),
        ({"planId": 1}, 422),
    ],
)
def test_calculate_plan_premium_errors(client, body, status):
    assert client.post("/api/plans/calculate", json=body).status_code == status


def test_featured_plans(client):
    r = client.get("/api/plans/featured")
    assert r.status_code == 200
    plans = r.json()
    assert len(plans) == 6
    assert plans[0]["planCode"] == "HEALTH-001-STANDARD"
    assert all(p["isPopular"] for p in plans)
    assert {p["displayOrder"] for p in plans} == {2}
    assert plans[0]["isFeatured"] is False
