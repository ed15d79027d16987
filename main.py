import asyncio
import logging
from dotenv import load_dotenv
from sentry_mcp.models.config import AppConfig
from sentry_mcp.server import SentryMCPServer

load_dotenv()

logger = logging.getLogger(__name__)

async def main():
    config = AppConfig.from_env()

    # stderr only: stdout carries the MCP protocol
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not config.sentry.is_configured():
        logger.error("Missing Sentry configuration (SENTRY_AUTH required)")
        return

    try:
        logger.info("Starting Sentry MCP server...")
        server = SentryMCPServer(config)
        await server.start()

    except Exception as e:
        logger.error(f"Fatal error: {e}")
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")

if __name__ == "__main__":
    asyncio.run(main())
