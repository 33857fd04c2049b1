import report_verdict
from report_verdict import models
from report_verdict.models.integrity_models import Counts as CoreCounts
from report_verdict.models.report_models import Feature as CoreFeature


def test_public_model_exports_remain_compatible():
    assert models.Counts is CoreCounts
    assert models.Feature is CoreFeature
    assert report_verdict.Counts is CoreCounts
    for name in models.__all__:
        assert hasattr(models, name)


def test_package_api_is_exported():
    for name in report_verdict.__all__:
        assert hasattr(report_verdict, name)
    assert callable(report_verdict.sanitize)
    assert callable(report_verdict.diagnose)
