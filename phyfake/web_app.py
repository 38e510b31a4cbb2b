"""
FastAPI application for the simulated provisioning API

Maps the /servers/... routes of the real API onto ServerService
operations and translates engine errors into HTTP status codes.

Features:
- One in-memory engine per application instance
- Background actions are awaited on shutdown
- /ping health check
"""

import os
import sys
import argparse
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from phyfake.api import (
    AssignNetworkParameter,
    ConfigureBondingParameter,
    EnableServerPortParameter,
    ErrorResponse,
    OsInstallParameter,
    PowerControlParameter,
    UpdateServerPortParameter,
)
from phyfake.config import (
    AppConfig,
    FeatureFlags,
    load_environment,
    setup_logging,
    validate_config
)
from phyfake.engine import Engine
from phyfake.errors import EngineError, ErrorType
from phyfake.seed import default_dataset, load_dataset
from phyfake.services import ServerService

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorType.NOT_FOUND: 404,
    ErrorType.CONFLICT: 409,
    ErrorType.INVALID_REQUEST: 400,
}

router = APIRouter()


def get_service(request: Request) -> ServerService:
    """Dependency returning the service bound to the running app"""
    return request.app.state.service


# ============================================================================
# Health check
# ============================================================================

@router.get("/ping", response_class=PlainTextResponse)
async def ping():
    return "pong"


# ============================================================================
# Servers
# ============================================================================

@router.get("/servers/")
async def list_servers(
    request: Request,
    service: ServerService = Depends(get_service)
):
    """List servers. Query parameters (limit, offset, filters) are accepted and ignored."""
    result = await service.list_servers(dict(request.query_params))
    return result


@router.get("/servers/{server_id}/")
async def read_server(server_id: str, service: ServerService = Depends(get_service)):
    return {"server": await service.read_server(server_id)}


@router.get("/servers/{server_id}/os_images/")
async def list_os_images(server_id: str, service: ServerService = Depends(get_service)):
    return {"os_images": await service.list_os_images(server_id)}


@router.post("/servers/{server_id}/os_install/", status_code=202)
async def os_install(
    server_id: str,
    params: OsInstallParameter,
    service: ServerService = Depends(get_service)
):
    await service.os_install(server_id, params.os_image_id)
    return Response(status_code=202)


# ============================================================================
# Port channels
# ============================================================================

@router.get("/servers/{server_id}/port_channels/{port_channel_id}/")
async def read_port_channel(
    server_id: str,
    port_channel_id: int,
    service: ServerService = Depends(get_service)
):
    return {"port_channel": await service.read_port_channel(server_id, port_channel_id)}


@router.post("/servers/{server_id}/port_channels/{port_channel_id}/configure_bonding/")
async def configure_bonding(
    server_id: str,
    port_channel_id: int,
    params: ConfigureBondingParameter,
    service: ServerService = Depends(get_service)
):
    port_channel = await service.configure_bonding(
        server_id, port_channel_id, params.bonding_type, params.port_nicknames
    )
    return {"port_channel": port_channel}


# ============================================================================
# Ports
# ============================================================================

@router.get("/servers/{server_id}/ports/{port_id}/")
async def read_port(server_id: str, port_id: int, service: ServerService = Depends(get_service)):
    return {"port": await service.read_port(server_id, port_id)}


@router.patch("/servers/{server_id}/ports/{port_id}/")
async def update_port(
    server_id: str,
    port_id: int,
    params: UpdateServerPortParameter,
    service: ServerService = Depends(get_service)
):
    return {"port": await service.update_port(server_id, port_id, params.nickname)}


@router.post("/servers/{server_id}/ports/{port_id}/assign_network/")
async def assign_network(
    server_id: str,
    port_id: int,
    params: AssignNetworkParameter,
    service: ServerService = Depends(get_service)
):
    port = await service.assign_network(
        server_id,
        port_id,
        internet_type=params.internet_type,
        dedicated_subnet_id=params.dedicated_subnet_id,
        mode=params.mode,
        private_network_ids=params.private_network_ids
    )
    return {"port": port}


@router.post("/servers/{server_id}/ports/{port_id}/enable/")
async def enable_port(
    server_id: str,
    port_id: int,
    params: EnableServerPortParameter,
    service: ServerService = Depends(get_service)
):
    return {"port": await service.set_port_enabled(server_id, port_id, params.enable)}


@router.get("/servers/{server_id}/ports/{port_id}/traffic_graph/")
async def read_port_traffic(
    server_id: str,
    port_id: int,
    request: Request,
    service: ServerService = Depends(get_service)
):
    """Fixed traffic series; since/until/step are accepted and ignored."""
    graph = await service.read_port_traffic(server_id, port_id, dict(request.query_params))
    return {"traffic_graph": graph}


# ============================================================================
# Power & RAID
# ============================================================================

@router.post("/servers/{server_id}/power_control/", status_code=202)
async def power_control(
    server_id: str,
    params: PowerControlParameter,
    service: ServerService = Depends(get_service)
):
    await service.power_control(server_id, params.operation)
    return Response(status_code=202)


@router.get("/servers/{server_id}/power_status/")
async def read_power_status(server_id: str, service: ServerService = Depends(get_service)):
    return {"power_status": await service.read_power_status(server_id)}


@router.get("/servers/{server_id}/raid_status/")
async def read_raid_status(
    server_id: str,
    refresh: bool = False,
    service: ServerService = Depends(get_service)
):
    return {"raid_status": await service.read_raid_status(server_id, refresh)}


# ============================================================================
# Error handling
# ============================================================================

async def engine_error_handler(request: Request, exc: EngineError) -> JSONResponse:
    status_code = ERROR_STATUS[exc.error_type]
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc}")
    return JSONResponse(status_code=status_code, content=ErrorResponse(**exc.to_dict()).model_dump())


# ============================================================================
# Initialization
# ============================================================================

def build_engine() -> Engine:
    """Create an engine from the configured seed file, or the default dataset"""
    if AppConfig.SEED_FILE:
        dataset = load_dataset(AppConfig.SEED_FILE)
    else:
        dataset = default_dataset()
    return Engine.from_dataset(dataset, action_delay=AppConfig.ACTION_DELAY_SECONDS)


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        engine: Engine to serve. Built from configuration when omitted.

    Returns:
        Configured application
    """
    engine = engine or build_engine()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{AppConfig.APP_NAME} serving {len(engine.servers)} server(s)")
        yield
        if engine.scheduler.pending:
            logger.info(f"Waiting for {engine.scheduler.pending} background action(s)")
        await engine.scheduler.join()
        logger.info("Shutdown complete")

    app = FastAPI(
        title=AppConfig.APP_NAME,
        description=AppConfig.APP_DESCRIPTION,
        version=AppConfig.APP_VERSION,
        debug=FeatureFlags.DEBUG,
        lifespan=lifespan
    )
    app.state.engine = engine
    app.state.service = ServerService(engine)
    app.add_exception_handler(EngineError, engine_error_handler)
    app.include_router(router)

    return app


# ============================================================================
# Main
# ============================================================================

def main():
    """
    Main entry point with CLI argument support.

    Supports:
        --env-file: Path to .env file
        --verbose: Enable debug logging
        --host: Server host (default: 127.0.0.1)
        --port: Server port (default: 8080)
        --seed-file: JSON dataset replacing the built-in one
        --reload: Enable auto-reload (development)
    """
    parser = argparse.ArgumentParser(
        description="phyfake - simulated physical server provisioning API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start with the built-in dataset
  python -m phyfake

  # Use custom .env file
  python -m phyfake --env-file /path/to/custom.env

  # Serve a custom dataset on another port
  python -m phyfake --seed-file servers.json --port 9000

  # Development mode with auto-reload
  python -m phyfake --reload --verbose
        """
    )

    parser.add_argument(
        "--env-file", "-e",
        help="Path to .env file (default: .env)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging"
    )

    parser.add_argument(
        "--host",
        default=None,
        help=f"Server host (default: {AppConfig.HOST})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help=f"Server port (default: {AppConfig.PORT})"
    )

    parser.add_argument(
        "--seed-file", "-s",
        help="JSON dataset to load instead of the built-in one"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )

    parser.add_argument(
        "--log-file",
        help="Path to log file (optional)"
    )

    args = parser.parse_args()

    if args.env_file:
        load_environment(args.env_file)

    # The app factory may run in a reloader subprocess, pass it through the environment
    if args.seed_file:
        os.environ["SEED_FILE"] = args.seed_file
        AppConfig.SEED_FILE = args.seed_file

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        validate_config()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    host = args.host or AppConfig.HOST
    port = args.port or AppConfig.PORT

    logger.info(f"Starting {AppConfig.APP_NAME} v{AppConfig.APP_VERSION}")
    logger.info(f"Host: {host}:{port}")
    logger.info(f"Simulated action delay: {AppConfig.ACTION_DELAY_SECONDS}s")

    import uvicorn
    uvicorn.run(
        "phyfake.web_app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=args.reload or FeatureFlags.RELOAD,
        log_level="debug" if args.verbose else "info"
    )


if __name__ == "__main__":
    main()
