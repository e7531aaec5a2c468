"""
Global test configuration and fixtures
"""

import time

import pytest

from codegraph_upgrade.common.logging_config import configure_logging
from codegraph_upgrade.domain.models import UpgradePolicy
from codegraph_upgrade.rules.suite import upgrade_060_suite
from tests.fakes import FakeSolidityFrontEnd, FakeSourceStore, RecordingReporter

# 느린 테스트 임계값 (초)
SLOW_TEST_THRESHOLD = 5.0
WARNING_TEST_THRESHOLD = 2.0


@pytest.fixture(autouse=True)
def track_test_duration(request):
    """모든 테스트의 실행 시간을 추적하고 느린 테스트 경고"""
    start_time = time.time()

    yield

    duration = time.time() - start_time
    test_name = request.node.nodeid

    if duration > SLOW_TEST_THRESHOLD:
        print(f"\n⚠️  SLOW TEST ({duration:.2f}s): {test_name}")
        print("   Consider marking with @pytest.mark.slow or optimizing")
    elif duration > WARNING_TEST_THRESHOLD:
        print(f"\n⏱️  Slow ({duration:.2f}s): {test_name}")


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """테스트 중 구조화 로그는 WARNING 이상만"""
    configure_logging(level="WARNING")


@pytest.fixture
def front_end() -> FakeSolidityFrontEnd:
    return FakeSolidityFrontEnd()


@pytest.fixture
def store() -> FakeSourceStore:
    return FakeSourceStore()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def suite():
    return upgrade_060_suite()


@pytest.fixture
def accept_all() -> UpgradePolicy:
    return UpgradePolicy(apply_safe=True, apply_unsafe=True)


# Pytest hooks
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (medium speed)")
    config.addinivalue_line("markers", "slow: Slow tests (>5s)")


def pytest_collection_modifyitems(config, items):
    """테스트 수집 후 처리"""
    for item in items:
        # 경로 기반 자동 마커 추가
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


def pytest_report_header(config):
    """리포트 헤더 추가"""
    return [
        "Test Structure: Unit (fake front end) > Integration (files, CLI)",
        f"Slow test threshold: {SLOW_TEST_THRESHOLD}s",
    ]
