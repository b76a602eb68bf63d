#!/usr/bin/env python3
"""
Average Calculator API Server
Fetches numbers from the evaluation service and keeps a sliding window of the
last unique values together with their average.
"""
import asyncio
import logging
from datetime import datetime

from aiohttp import web

import config
from aggregation import SlidingUniqueWindow
from number_client import NumberFeedClient

# Configure logging
logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class AverageCalculatorAPI:
    def __init__(self, client=None, window=None, urls=None):
        self.client = client or NumberFeedClient()
        self.window = window if window is not None else SlidingUniqueWindow(config.WINDOW_SIZE)
        self.urls = urls or config.number_urls()

    def _respond(self, data, status=200):
        response = web.json_response(data, status=status)
        if config.ENABLE_CORS:
            response.headers['Access-Control-Allow-Origin'] = '*'
        return response

    async def on_startup(self, app):
        await self.client.start()

    async def on_cleanup(self, app):
        await self.client.close()

    async def handle_numbers(self, request):
        """Handle /numbers/{numberid} endpoint"""
        number_id = request.match_info['numberid']
        url = self.urls.get(number_id)
        if url is None:
            return self._respond({'error': 'Invalid number ID'}, status=400)

        try:
            numbers = await self.client.fetch_numbers(url)
            # no await between ingest and average: the triple is consistent
            previous, current = self.window.ingest(numbers)
            avg = self.window.average()
            logger.debug(f"Ingested {len(numbers)} numbers for '{number_id}', window size {len(current)}")
            return self._respond({
                'windowPrevState': previous,
                'windowCurrState': current,
                'numbers': numbers,
                'avg': avg,
            })
        except Exception as e:
            logger.error(f"Error in handle_numbers: {e}")
            return self._respond({'error': str(e)}, status=500)

    async def handle_status(self, request):
        """Handle /healthz endpoint"""
        return self._respond({
            'status': 'operational',
            'timestamp': datetime.now().isoformat(),
            'window': {
                'size': len(self.window),
                'capacity': self.window.capacity,
            },
            'categories': sorted(self.urls),
        })


def create_app(api=None):
    """Create the web application"""
    api = api or AverageCalculatorAPI()
    app = web.Application()
    app['api'] = api
    app.on_startup.append(api.on_startup)
    app.on_cleanup.append(api.on_cleanup)

    app.router.add_get('/numbers/{numberid}', api.handle_numbers)
    app.router.add_get('/healthz', api.handle_status)
    return app


async def main():
    """Start the API server"""
    app = create_app()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, config.API_HOST, config.NUMBER_API_PORT)
    await site.start()

    logger.info(f"🚀 Average calculator running on port {config.NUMBER_API_PORT}")
    logger.info("Endpoints:")
    logger.info("  GET /numbers/{p|f|e|r} - Fetch numbers and update the window")
    logger.info("  GET /healthz           - Health probe")

    try:
        await asyncio.Future()  # Run forever
    finally:
        logger.info("Shutting down...")
        await runner.cleanup()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("Average calculator stopped")
