"""
Dependency Injection Containers

어댑터 구성 요소의 의존성을 관리하는 DI 컨테이너를 정의합니다.

아키텍처:
- InfrastructureContainer: LBank REST 클라이언트 (Resource) + Settings 주입
- ApplicationContainer: 최상위 컨테이너 (LbankTrader, 마켓 캐시는 어댑터가 소유)

주요 패턴:
- Resource Provider: HTTP 세션 async init/shutdown 자동 관리
- Object Provider: settings.py 싱글톤 주입 (DI)
- Singleton: 프로세스당 하나의 어댑터 (마켓 캐시 포함)

사용 예시:
    container = ApplicationContainer()
    await container.init_resources()
    trader = await container.trader()
    rates = await trader.get_rates("BTC/USDT")
    await container.shutdown_resources()
"""

from dependency_injector import containers, providers

from lbank_trader.config.init_infra import init_api_client
from lbank_trader.config.settings import lbank_settings, logging_settings
from lbank_trader.exchange.lbank import LbankTrader


# ========================================
# 1. Infrastructure Container (인프라 레이어)
# ========================================
class InfrastructureContainer(containers.DeclarativeContainer):
    """인프라 컨테이너

    - LBank REST 클라이언트 (세션 라이프사이클은 Resource가 관리)
    - Settings: settings.py 싱글톤 주입 (DI)
    """

    lbank_config = providers.Object(lbank_settings)
    logging_config = providers.Object(logging_settings)

    api_client = providers.Resource(init_api_client, config=lbank_config)


# ========================================
# 2. Application Container (최상위)
# ========================================
class ApplicationContainer(containers.DeclarativeContainer):
    """최상위 애플리케이션 컨테이너"""

    infra = providers.Container(InfrastructureContainer)

    trader = providers.Singleton(
        LbankTrader,
        api_client=infra.api_client,
        load_markets=infra.lbank_config.provided.load_markets,
        strict_cancel=infra.lbank_config.provided.strict_cancel,
    )
