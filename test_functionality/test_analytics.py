"""
Tests for rolling statistics and clinical insights.
"""
from datetime import timedelta

import pytest

from application.services.analytics import AnalyticsService, compute_clinical_insights, compute_stats
from conftest import TODAY, make_crisis, make_med
from domain.models import CrisisStats, Relief
from infrastructure.persistence.crisis_repo import sort_by_date_desc


def days_ago(n):
    return (TODAY - timedelta(days=n)).isoformat()


def naive_stats(crises, today, window_days=30):
    """Full filter+reduce with no reliance on ordering."""
    cutoff = (today - timedelta(days=window_days)).isoformat()
    recent = [c for c in crises if c.date >= cutoff]
    avg = f"{sum(c.intensity for c in recent) / len(recent):.1f}" if recent else "0"
    return len(recent), avg


class TestComputeStats:
    def test_empty_collection(self):
        stats = compute_stats([], TODAY)
        assert stats == CrisisStats()
        assert stats.to_dict() == {"totalRecent": 0, "avgIntensity": "0", "totalHistory": 0, "daysFree": 0}

    def test_record_today_has_zero_days_free(self):
        assert compute_stats([make_crisis(TODAY.isoformat())], TODAY).days_free == 0

    def test_window_example(self):
        crises = sort_by_date_desc([
            make_crisis(days_ago(40), intensity=4),
            make_crisis(days_ago(25), intensity=6),
            make_crisis(days_ago(5), intensity=8),
        ])
        stats = compute_stats(crises, TODAY)
        assert stats.total_recent == 2
        assert stats.avg_intensity == "7.0"
        assert stats.total_history == 3
        assert stats.days_free == 5

    def test_window_boundary_is_inclusive(self):
        crises = sort_by_date_desc([make_crisis(days_ago(30)), make_crisis(days_ago(31))])
        assert compute_stats(crises, TODAY).total_recent == 1

    def test_future_record_clamps_days_free(self):
        crises = [make_crisis((TODAY + timedelta(days=3)).isoformat())]
        assert compute_stats(crises, TODAY).days_free == 0

    def test_only_old_records(self):
        stats = compute_stats([make_crisis(days_ago(60), intensity=9)], TODAY)
        assert stats.total_recent == 0
        assert stats.avg_intensity == "0"
        assert stats.days_free == 60

    def test_average_uses_one_decimal(self):
        crises = sort_by_date_desc([make_crisis(days_ago(i), intensity=v) for i, v in [(1, 3), (2, 4), (3, 4)]])
        assert compute_stats(crises, TODAY).avg_intensity == "3.7"

    @pytest.mark.parametrize("offsets", [
        [0, 1, 2, 29, 30, 31, 45, 100],
        [5, 5, 5, 40, 40],
        [31, 60, 90],
        [0],
    ])
    def test_early_break_matches_full_scan(self, offsets):
        crises = sort_by_date_desc([
            make_crisis(days_ago(n), intensity=(n % 10) + 1) for n in offsets
        ])
        stats = compute_stats(crises, TODAY)
        assert (stats.total_recent, stats.avg_intensity) == naive_stats(crises, TODAY)

    def test_custom_window(self):
        crises = sort_by_date_desc([make_crisis(days_ago(6)), make_crisis(days_ago(8))])
        assert compute_stats(crises, TODAY, window_days=7).total_recent == 1


class TestClinicalInsights:
    def test_empty_is_none(self):
        assert compute_clinical_insights([]) is None

    def test_top_symptom(self):
        crises = [
            make_crisis("2024-05-01", symptoms=["Nausea"]),
            make_crisis("2024-05-02", symptoms=["Nausea", "Photophobia"]),
            make_crisis("2024-05-03"),
        ]
        assert compute_clinical_insights(crises).top_symptom == "Nausea"

    def test_ineffective_medications_are_ignored(self):
        crises = [
            make_crisis("2024-05-01", medications=[make_med("Paracetamol", Relief.NONE)]),
            make_crisis("2024-05-02", medications=[make_med("Paracetamol", Relief.NONE)]),
            make_crisis("2024-05-03", medications=[make_med("Paracetamol", Relief.NONE)]),
            make_crisis("2024-05-04", medications=[make_med("Sumatriptan", Relief.TOTAL)]),
        ]
        assert compute_clinical_insights(crises).top_medication == "Sumatriptan"

    def test_fallback_labels(self):
        insights = compute_clinical_insights([
            make_crisis("2024-05-01", medications=[make_med("Paracetamol", Relief.NONE)]),
        ])
        assert insights.to_dict() == {
            "topSymptom": "None",
            "topMedication": "Not registered",
            "topLocalization": "Diffuse",
        }

    def test_top_localization(self):
        crises = [
            make_crisis("2024-05-01", localization=["Temporal", "Occipital"]),
            make_crisis("2024-05-02", localization=["Temporal"]),
        ]
        assert compute_clinical_insights(crises).top_localization == "Temporal"


class TestAnalyticsService:
    def test_reads_repository_with_clock(self, crisis_repo):
        crisis_repo.save(make_crisis(days_ago(2), intensity=6, symptoms=["Aura"]))
        crisis_repo.save(make_crisis(days_ago(50), intensity=2))
        service = AnalyticsService(crisis_repo, clock=lambda: TODAY)
        stats = service.get_stats()
        assert (stats.total_recent, stats.avg_intensity, stats.total_history, stats.days_free) == (1, "6.0", 2, 2)
        assert service.get_clinical_insights().top_symptom == "Aura"

    def test_reflects_mutations_immediately(self, crisis_repo):
        service = AnalyticsService(crisis_repo, clock=lambda: TODAY)
        saved = crisis_repo.save(make_crisis(days_ago(1)))
        assert service.get_stats().total_history == 1
        crisis_repo.delete(saved.id)
        assert service.get_stats().total_history == 0
