"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the FastAPI
gateway or runs one-shot orchestrator commands.
"""

import argparse
import asyncio
import json

import uvicorn

from mortgage_sim.bootstrap import bootstrap_create_application, bootstrap_create_orchestrator
from mortgage_sim.config import config_configure_logging, config_load_settings


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with code 1 when `health-check` finds an unhealthy service.
    """

    argument_parser = argparse.ArgumentParser(description="Mortgage service virtualization runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "health-check", "status"),
        help="Runtime command: `api` starts the gateway, `health-check` polls every virtual service once, "
        "`status` prints service status JSON",
        type=str,
    )
    parsed_arguments = argument_parser.parse_args()

    if parsed_arguments.command == "health-check":
        if not asyncio.run(main_run_health_check()):
            raise SystemExit(1)
        return

    if parsed_arguments.command == "status":
        print(json.dumps(asyncio.run(main_collect_status()), indent=2, sort_keys=True))
        return

    settings = config_load_settings()
    application = bootstrap_create_application()
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


async def main_run_health_check() -> bool:
    """Start all services, poll health once and shut down.

    Returns:
        bool: True when every service reported healthy.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    settings = config_load_settings()
    config_configure_logging(settings)
    orchestrator = bootstrap_create_orchestrator(settings)
    await orchestrator.orchestrator_start()
    try:
        health_records = await orchestrator.orchestrator_poll_health()
    finally:
        await orchestrator.orchestrator_shutdown()

    for record in health_records:
        print(f"{record.service_name}: {record.status}")
    return all(record.health_is_healthy() for record in health_records)


async def main_collect_status() -> dict[str, object]:
    settings = config_load_settings()
    config_configure_logging(settings)
    orchestrator = bootstrap_create_orchestrator(settings)
    await orchestrator.orchestrator_start()
    try:
        return {
            "services": orchestrator.orchestrator_get_status(),
            "metrics": orchestrator.orchestrator_get_metrics(),
        }
    finally:
        await orchestrator.orchestrator_shutdown()


if __name__ == "__main__":
    main()
