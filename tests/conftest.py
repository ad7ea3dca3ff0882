"""Fixtures for the test suite."""

import copy
import os

# Settings are read at import time; point them at harmless values first.
os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from idea_validator.db.database import build_engine, get_db, init_db
from idea_validator.main import app
from idea_validator.services.gemini_service import get_gemini_service

SAMPLE_REPORT = {
    "userAnalysis": {
        "targetUsers": ["Independent artisans", "Gift shoppers"],
        "userPersonas": [
            {
                "name": "Maya the Maker",
                "demographics": "34, ceramicist, sells at weekend markets",
                "painPoints": ["Inconsistent foot traffic", "High marketplace fees"],
                "goals": ["Reach repeat buyers", "Sell year-round"],
            }
        ],
        "userJourney": ["Discover app", "Create shop", "List first item", "Make first sale"],
    },
    "painPoints": {
        "primaryProblems": [
            {
                "problem": "Artisans lack affordable online reach",
                "severity": "high",
                "frequency": "frequent",
                "currentSolutions": ["Etsy", "Instagram"],
            }
        ],
        "marketGap": "No local-first marketplace with low fees",
    },
    "features": {
        "coreFeatures": [
            {
                "name": "Local discovery",
                "description": "Browse crafts made nearby",
                "priority": "must-have",
                "complexity": "medium",
                "userValue": "Buyers find unique local goods",
            },
            {
                "name": "Workshop booking",
                "description": "Book in-person craft workshops",
                "priority": "nice-to-have",
                "complexity": "high",
                "userValue": "Extra revenue for makers",
            },
        ],
        "mvpFeatures": ["Shop profiles", "Local discovery", "Checkout"],
        "futureFeatures": ["Workshop booking"],
    },
    "risks": {
        "technicalRisks": [
            {"risk": "Payment integration delays", "probability": "medium", "impact": "high", "mitigation": "Use Stripe Connect"}
        ],
        "marketRisks": [
            {"risk": "Chicken-and-egg liquidity", "probability": "high", "impact": "medium", "mitigation": "Seed with market vendors"}
        ],
        "businessRisks": [
            {"risk": "Low take rate", "probability": "low", "impact": "medium", "mitigation": "Premium listings"}
        ],
    },
    "metrics": {
        "successMetrics": [
            {"metric": "Active sellers", "target": "200", "timeframe": "6 months", "measurement": "Sellers with a listing"}
        ],
        "kpis": ["GMV", "Repeat purchase rate"],
        "validationMetrics": ["Waitlist signups"],
    },
    "marketAnalysis": {
        "marketSize": {"tam": "$50B", "sam": "$5B", "som": "$50M"},
        "competition": [
            {
                "competitor": "Etsy",
                "strengths": ["Brand", "Traffic"],
                "weaknesses": ["Fees", "Not local"],
                "differentiation": "Local pickup and lower fees",
            }
        ],
        "validationSteps": ["Interview 20 artisans", "Run a landing page test"],
    },
    "viabilityScore": 7.5,
    "recommendation": "proceed-with-caution",
    "reasoning": "Clear pain point but a crowded market.",
    "nextSteps": [
        {"step": "Interview artisans", "priority": "high", "timeframe": "2 weeks", "resources": "Founder time"}
    ],
}


class FakeProvider:
    """Stands in for GeminiService: returns a canned payload or raises."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    async def generate_structured(self, prompt, response_schema):
        self.calls.append((prompt, response_schema))
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.payload)


@pytest.fixture
def report_payload():
    return copy.deepcopy(SAMPLE_REPORT)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'ideas.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def provider(report_payload):
    return FakeProvider(payload=report_payload)


@pytest.fixture
def client(session_factory, provider):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gemini_service] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()
