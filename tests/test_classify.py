import pytest

from auditdeck.audit.classify import (
    STATUS_STYLES,
    badge_class,
    classify,
    classify_control,
    classify_trend,
)
from auditdeck.audit.models import ComplianceStatus, Severity


class TestClassify:
    @pytest.mark.parametrize(
        "status,rank",
        [
            ("CRITICAL", 1),
            ("WARNING", 2),
            ("PASS", 3),
            ("SKIPPED", 4),
            ("INFO", 5),
            ("bogus", 6),
            ("", 6),
            (None, 6),
        ],
    )
    def test_severity_rank(self, status, rank):
        assert classify(status).severity_rank == rank

    def test_skipped_and_info_share_style_not_rank(self):
        skipped, info = classify("SKIPPED"), classify("INFO")
        assert skipped.css_class == info.css_class
        assert skipped.badge_class == info.badge_class
        assert skipped.severity_rank != info.severity_rank

    def test_critical_uses_inverse_styling(self):
        assert "badge-inverse" in classify("CRITICAL").css_class
        assert "badge-critical" in classify("CRITICAL").css_class

    def test_unknown_is_neutral(self):
        style = classify("something-else")
        assert style is STATUS_STYLES[Severity.UNKNOWN]
        assert style.css_class == "badge"

    def test_referentially_consistent(self):
        assert classify("WARNING") == classify("WARNING")
        assert classify(Severity.WARNING) is classify("WARNING")

    def test_accepts_enum_and_case_variants(self):
        assert classify("critical").severity_rank == 1
        assert classify(" pass ").severity_rank == 3

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            STATUS_STYLES[Severity.INFO] = STATUS_STYLES[Severity.PASS]


class TestBadgeClass:
    def test_badge_modifiers(self):
        assert badge_class("CRITICAL") == "impact-badge impact-critical"
        assert badge_class("WARNING") == "impact-badge impact-warning"
        assert badge_class("PASS") == "impact-badge impact-pass"
        assert badge_class("SKIPPED") == "impact-badge impact-info"
        assert badge_class("INFO") == "impact-badge impact-info"
        assert badge_class("other") == "impact-badge"


class TestControlAndTrendStyles:
    def test_non_compliant_ranks_first(self):
        ranks = [
            classify_control(s).rank
            for s in ("Non-Compliant", "Partial Compliance", "Compliant", "Not Applicable")
        ]
        assert ranks == sorted(ranks)

    def test_control_status_parsing(self):
        assert ComplianceStatus.from_value("non-compliant") is ComplianceStatus.NON_COMPLIANT
        assert ComplianceStatus.from_value("weird") is ComplianceStatus.UNKNOWN
        assert classify_control("weird").css_class == "badge"

    def test_trend_directions(self):
        assert classify_trend("improving").icon == "▲"
        assert classify_trend("declining").icon == "▼"
        assert classify_trend("sideways").icon == "▶"
