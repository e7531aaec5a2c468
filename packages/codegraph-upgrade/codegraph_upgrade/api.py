"""
Upgrade API - Entry Point

설정 기반 초기화 및 실행
"""

from collections.abc import Mapping, Sequence

from .application.driver import UpgradeDriver
from .application.ports import FrontEndPort, NullReporter, SourceStorePort, UpgradeReporterPort
from .domain.models import UpgradeState
from .infrastructure.config import UpgradeSettings
from .infrastructure.solc_adapter import SolcFrontEnd
from .infrastructure.source_store import ALLOW_ALL, FileSourceStore
from .rules.suite import UpgradeSuite, build_suite, upgrade_060_suite


class UpgradeAPI:
    """
    Upgrade API (Facade)

    외부에서 사용하는 진입점

    Example:
        ```python
        api = UpgradeAPI(UpgradeSettings(accept_safe=True))
        state = api.run(["contracts/Token.sol"])
        ```
    """

    def __init__(
        self,
        settings: UpgradeSettings | None = None,
        front_end: FrontEndPort | None = None,
        store: SourceStorePort | None = None,
        reporter: UpgradeReporterPort | None = None,
        suite: UpgradeSuite | None = None,
    ):
        """
        Args:
            settings: 설정 (None이면 환경 변수에서 로드)
            front_end: Front end (선택적, 직접 주입)
            store: SourceStore (선택적, 직접 주입)
            reporter: 출력 (None = 출력 없음)
            suite: Rule suite (None이면 settings.driver.rules 기준)

        Raises:
            InvalidConfigurationError: 알 수 없는 rule 이름
        """
        self.settings = settings or UpgradeSettings()
        solc = self.settings.solc
        driver = self.settings.driver

        # Infrastructure (Adapters)
        self.store = store or FileSourceStore(
            allowed_directories=solc.allow_paths,
            ignore_missing=driver.ignore_missing,
        )
        self.front_end = front_end or SolcFrontEnd(
            binary=solc.binary,
            allow_paths=[path for path in solc.allow_paths if path != ALLOW_ALL],
            base_path=solc.base_path,
            evm_version=solc.evm_version,
            read_callback=self.store.read,
            timeout=solc.timeout,
        )
        self.reporter = reporter or NullReporter()

        if suite is None:
            suite = build_suite(driver.rules) if driver.rules else upgrade_060_suite()

        # Application (Use Case)
        self.driver = UpgradeDriver(
            front_end=self.front_end,
            suite=suite,
            store=self.store,
            reporter=self.reporter,
            policy=driver.policy(),
            max_iterations=driver.max_iterations,
            detect_cycles=driver.detect_cycles,
        )

    def load(self, paths: Sequence[str]) -> dict[str, str]:
        """입력 파일 읽기 (InvalidInputError 전파)"""
        return self.store.load(paths)

    def run(self, paths: Sequence[str]) -> UpgradeState:
        """
        파일 경로로 업그레이드 실행

        Returns:
            UpgradeState (최종 상태)
        """
        return self.run_sources(self.load(paths))

    def run_sources(self, sources: Mapping[str, str]) -> UpgradeState:
        """이미 읽은 소스로 업그레이드 실행"""
        return self.driver.run(sources)

    @property
    def sources(self) -> dict[str, str]:
        """마지막 실행 후 unit 텍스트"""
        return self.driver.sources
