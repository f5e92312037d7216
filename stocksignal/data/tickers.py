"""Static ticker lists used by the scanner."""

POPULAR_TICKERS = [
    # Tech giants
    "AAPL", "MSFT", "GOOGL", "AMZN", "META", "NVDA", "TSLA",
    # Other major tech
    "NFLX", "AMD", "INTC", "ORCL", "ADBE", "CRM", "CSCO",
    # Finance
    "JPM", "BAC", "WFC", "GS", "MS", "V", "MA",
    # Healthcare
    "JNJ", "UNH", "PFE", "ABBV", "MRK", "TMO", "LLY",
    # Consumer
    "WMT", "HD", "DIS", "NKE", "MCD", "SBUX", "COST",
    # Industrial
    "BA", "CAT", "GE", "MMM", "HON", "UPS", "RTX",
    # Energy
    "XOM", "CVX", "COP", "SLB", "EOG",
    # Telecom
    "T", "VZ", "TMUS",
    # Growth
    "PLTR", "COIN", "RBLX", "SNOW", "DKNG", "SQ", "SHOP",
]

# Yahoo Finance crypto pairs use the {SYMBOL}-USD form
CRYPTO_TICKERS = [
    "BTC-USD", "ETH-USD", "USDT-USD", "BNB-USD", "SOL-USD",
    "XRP-USD", "USDC-USD", "ADA-USD", "DOGE-USD", "TRX-USD",
    "AVAX-USD", "DOT-USD", "MATIC-USD", "LINK-USD", "SHIB-USD",
    "UNI-USD", "LTC-USD", "ATOM-USD", "XLM-USD", "ALGO-USD",
]

TICKER_CATEGORIES = {
    "Tech Giants": POPULAR_TICKERS[0:7],
    "Tech": POPULAR_TICKERS[7:14],
    "Finance": POPULAR_TICKERS[14:21],
    "Healthcare": POPULAR_TICKERS[21:28],
    "Consumer": POPULAR_TICKERS[28:35],
    "Industrial": POPULAR_TICKERS[35:42],
    "Energy": POPULAR_TICKERS[42:47],
    "Telecom": POPULAR_TICKERS[47:50],
    "Growth": POPULAR_TICKERS[50:57],
    "Crypto": [
        "BTC-USD", "ETH-USD", "SOL-USD", "XRP-USD", "ADA-USD",
        "DOGE-USD", "AVAX-USD", "DOT-USD", "MATIC-USD", "LINK-USD",
    ],
}
