"""Analytics endpoints: rolling statistics and clinical insights."""

from fastapi import APIRouter, Depends

from factory import ServiceFactory
from adapters.rest.dependencies import get_factory

router = APIRouter(tags=["analytics"])


@router.get("/stats")
def get_stats(factory: ServiceFactory = Depends(get_factory)):
    """
    Return statistics for the home and report screens:
    - totalRecent / avgIntensity over the last 30 days
    - totalHistory
    - daysFree since the latest entry
    """
    return factory.create_analytics_service().get_stats().to_dict()


@router.get("/insights")
def get_insights(factory: ServiceFactory = Depends(get_factory)):
    """Most frequent symptom, effective medication and location; null when empty."""
    insights = factory.create_analytics_service().get_clinical_insights()
    return insights.to_dict() if insights else None
