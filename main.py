"""
Grain Vent: hourly aeration forecast

Fetches the hourly weather forecast for the storage site, estimates the grain
moisture the ventilation air would drive the bin toward, and prints one row
per hour with the condensation threshold alongside.

Location and plenum offset fall back to the values stored by the last run.

Usage:
    python main.py --material wheat --lat 34.2610 --lon 108.9420 --offset 2 --save
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from grain_vent.forecast import build_moisture_forecast, forecast_to_dataframe
from grain_vent.materials import Material
from grain_vent.providers.caiyun import CaiyunProvider, WeatherConfigError
from grain_vent.resilience import RetryConfig
from grain_vent.settings_store import SettingsStore

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

RETRY_CONFIG = RetryConfig(
    max_retries=2,
    base_delay_seconds=1.0,
    max_delay_seconds=5.0,
    jitter=True
)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Grain Vent - estimated grain moisture under ventilation air'
    )
    parser.add_argument('--material', required=True,
                        choices=[m.value for m in Material],
                        help='Stored grain or oilseed')
    parser.add_argument('--lat', type=float, help='Site latitude (decimal degrees)')
    parser.add_argument('--lon', type=float, help='Site longitude (decimal degrees)')
    parser.add_argument('--offset', type=float,
                        help='Fan/plenum temperature rise in Celsius (default: stored value or 0)')
    parser.add_argument('--save', action='store_true',
                        help='Remember location and offset for the next run')
    parser.add_argument('--csv', type=Path, help='Also write the forecast to this CSV file')
    args = parser.parse_args(argv)

    if (args.lat is None) != (args.lon is None):
        parser.error('--lat and --lon must be given together')

    return args


def setup_logging():
    """Log to logs/grain_vent.log and stdout."""
    os.makedirs("logs", exist_ok=True)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler("logs/grain_vent.log", mode='a', encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )


async def run(args) -> int:
    store = SettingsStore()
    settings = store.load_settings()

    if args.lat is not None and args.lon is not None:
        location = {"latitude": args.lat, "longitude": args.lon}
    elif settings.last_location is not None:
        location = settings.last_location
        logger.info(f"[run] Using stored location {location}")
    else:
        logger.error("[run] No location given and none stored; pass --lat and --lon")
        return 1

    offset = args.offset if args.offset is not None else settings.offset

    try:
        provider = CaiyunProvider(retry_config=RETRY_CONFIG)
    except WeatherConfigError as e:
        logger.error(f"[run] {e}")
        return 1

    weather = await provider.fetch_with_retry(location)
    if weather is None:
        logger.error("[run] Weather data unavailable")
        return 1

    results = build_moisture_forecast(weather, args.material, offset)
    df = forecast_to_dataframe(results)

    if df.empty:
        logger.warning("[run] No hour produced a computable moisture estimate")
    else:
        print(df.to_string(index=False))

    if args.csv:
        args.csv.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.csv, index=False)
        logger.info(f"[run] Wrote {len(df)} rows to {args.csv}")

    if args.save:
        settings.offset = offset
        settings.last_location = location
        store.save_settings(settings)

    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging()
    logger.info(f"[main] Grain Vent forecast: material={args.material}")
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
