#!/usr/bin/env python3
"""
Stock Price Aggregation API Server
Serves recent price history per ticker, its average over a time window and
the correlation between two tickers.
"""
import asyncio
import logging
from datetime import datetime, timezone

from aiohttp import web

import config
from aggregation import average, pearson_correlation
from stock_store import StockPriceStore

# Configure logging
logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def _parse_minutes(raw):
    """Whole number of minutes from a query value, or None if unusable."""
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _utcnow():
    return datetime.now(timezone.utc)


class StockAPI:
    def __init__(self, store=None, clock=None):
        self.store = store if store is not None else StockPriceStore()
        self.clock = clock or _utcnow

    def _respond(self, data, status=200):
        response = web.json_response(data, status=status)
        if config.ENABLE_CORS:
            response.headers['Access-Control-Allow-Origin'] = '*'
        return response

    async def handle_stock(self, request):
        """Handle /stocks/{ticker} endpoint"""
        minutes = _parse_minutes(request.query.get('minutes'))
        if minutes is None or request.query.get('aggregation') != 'average':
            return self._respond({'error': 'Invalid query parameters'}, status=400)

        ticker = request.match_info['ticker']
        if self.store.history(ticker) is None:
            return self._respond({'error': 'Ticker not found'}, status=404)

        try:
            filtered = self.store.within_minutes(ticker, minutes, now=self.clock())
            return self._respond({
                'averageStockPrice': average(entry['price'] for entry in filtered),
                'priceHistory': filtered,
            })
        except Exception as e:
            logger.error(f"Error in handle_stock: {e}")
            return self._respond({'error': str(e)}, status=500)

    async def handle_correlation(self, request):
        """Handle /stockcorrelation endpoint"""
        tickers = request.query.getall('ticker', [])
        minutes = _parse_minutes(request.query.get('minutes'))
        if len(tickers) != 2 or minutes is None:
            return self._respond({'error': 'Provide 2 tickers and minutes'}, status=400)

        try:
            now = self.clock()
            t1, t2 = (t.upper() for t in tickers)
            d1 = self.store.within_minutes(t1, minutes, now=now)
            d2 = self.store.within_minutes(t2, minutes, now=now)
            if not d1 or not d2:
                return self._respond({'error': 'Insufficient data'}, status=404)

            prices1 = [entry['price'] for entry in d1]
            prices2 = [entry['price'] for entry in d2]
            return self._respond({
                'correlation': pearson_correlation(prices1, prices2),
                'stocks': {
                    t1: {'averagePrice': average(prices1), 'priceHistory': d1},
                    t2: {'averagePrice': average(prices2), 'priceHistory': d2},
                },
            })
        except Exception as e:
            logger.error(f"Error in handle_correlation: {e}")
            return self._respond({'error': str(e)}, status=500)

    async def handle_evaluation_stock(self, request):
        """Handle /evaluation-service/stocks/{ticker} endpoint"""
        ticker = request.match_info['ticker']
        if self.store.history(ticker) is None:
            return self._respond({'error': 'Stock not found'}, status=404)

        raw_minutes = request.query.get('minutes')
        if raw_minutes:
            minutes = _parse_minutes(raw_minutes)
            if minutes is None:
                return self._respond({'error': 'Invalid query parameters'}, status=400)
            return self._respond(self.store.within_minutes(ticker, minutes, now=self.clock()))
        return self._respond({'stock': self.store.latest(ticker)})

    async def handle_status(self, request):
        """Handle /healthz endpoint"""
        return self._respond({
            'status': 'operational',
            'timestamp': datetime.now().isoformat(),
            'tickers': self.store.tickers(),
        })


def create_app(store=None, clock=None):
    """Create the web application"""
    api = StockAPI(store=store, clock=clock)
    app = web.Application()
    app['api'] = api

    app.router.add_get('/stocks/{ticker}', api.handle_stock)
    app.router.add_get('/stockcorrelation', api.handle_correlation)
    app.router.add_get('/evaluation-service/stocks/{ticker}', api.handle_evaluation_stock)
    app.router.add_get('/healthz', api.handle_status)
    return app


async def main():
    """Start the API server"""
    app = create_app()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, config.API_HOST, config.STOCK_API_PORT)
    await site.start()

    logger.info(f"Stock API server running on port {config.STOCK_API_PORT}")
    logger.info("Endpoints:")
    logger.info("  GET /stocks/{ticker}?minutes=m&aggregation=average - Average price")
    logger.info("  GET /stockcorrelation?minutes=m&ticker=A&ticker=B   - Price correlation")
    logger.info("  GET /evaluation-service/stocks/{ticker}             - Raw price history")
    logger.info("  GET /healthz                                        - Health probe")

    try:
        await asyncio.Future()  # Run forever
    finally:
        logger.info("Shutting down...")
        await runner.cleanup()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("Stock API server stopped")
