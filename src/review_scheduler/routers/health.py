from fastapi import APIRouter

router = APIRouter()


@router.get("/healthz")
def health_check() -> dict[str, str]:
    """Liveness probe.

    監視ツールやコンテナオーケストレータからの疎通確認に使用。
    """
    return {"status": "ok"}
