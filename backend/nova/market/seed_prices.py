"""Seed universe and per-asset parameters for the market simulator."""

# Starting USD prices and circulating supply for the simulated universe.
# Roughly the top of the market-cap table as of project creation.
SEED_ASSETS: dict[str, dict] = {
    "bitcoin": {"name": "Bitcoin", "symbol": "btc", "price": 67000.00, "supply": 19.7e6},
    "ethereum": {"name": "Ethereum", "symbol": "eth", "price": 3500.00, "supply": 120.1e6},
    "tether": {"name": "Tether", "symbol": "usdt", "price": 1.00, "supply": 110.0e9},
    "binancecoin": {"name": "BNB", "symbol": "bnb", "price": 580.00, "supply": 146.0e6},
    "solana": {"name": "Solana", "symbol": "sol", "price": 150.00, "supply": 465.0e6},
    "usd-coin": {"name": "USDC", "symbol": "usdc", "price": 1.00, "supply": 33.0e9},
    "ripple": {"name": "XRP", "symbol": "xrp", "price": 0.52, "supply": 55.0e9},
    "dogecoin": {"name": "Dogecoin", "symbol": "doge", "price": 0.15, "supply": 144.0e9},
    "cardano": {"name": "Cardano", "symbol": "ada", "price": 0.45, "supply": 35.5e9},
    "avalanche-2": {"name": "Avalanche", "symbol": "avax", "price": 35.00, "supply": 393.0e6},
    "chainlink": {"name": "Chainlink", "symbol": "link", "price": 14.00, "supply": 608.0e6},
    "polkadot": {"name": "Polkadot", "symbol": "dot", "price": 7.00, "supply": 1.4e9},
    "litecoin": {"name": "Litecoin", "symbol": "ltc", "price": 80.00, "supply": 74.6e6},
    "uniswap": {"name": "Uniswap", "symbol": "uni", "price": 9.00, "supply": 600.0e6},
}

# Per-asset GBM parameters
# sigma: annualized volatility (crypto runs far hotter than equities)
# mu: annualized drift / expected return
# turnover: share of market cap traded per day, used for synthetic volume
ASSET_PARAMS: dict[str, dict[str, float]] = {
    "bitcoin": {"sigma": 0.55, "mu": 0.10, "turnover": 0.025},
    "ethereum": {"sigma": 0.70, "mu": 0.10, "turnover": 0.035},
    "tether": {"sigma": 0.004, "mu": 0.0, "turnover": 0.45},  # Pegged
    "binancecoin": {"sigma": 0.60, "mu": 0.06, "turnover": 0.02},
    "solana": {"sigma": 0.95, "mu": 0.12, "turnover": 0.05},
    "usd-coin": {"sigma": 0.004, "mu": 0.0, "turnover": 0.20},  # Pegged
    "ripple": {"sigma": 0.85, "mu": 0.05, "turnover": 0.04},
    "dogecoin": {"sigma": 1.10, "mu": 0.05, "turnover": 0.06},  # Meme, high volatility
    "cardano": {"sigma": 0.85, "mu": 0.04, "turnover": 0.03},
    "avalanche-2": {"sigma": 0.95, "mu": 0.06, "turnover": 0.04},
    "chainlink": {"sigma": 0.90, "mu": 0.06, "turnover": 0.05},
    "polkadot": {"sigma": 0.85, "mu": 0.04, "turnover": 0.03},
    "litecoin": {"sigma": 0.75, "mu": 0.03, "turnover": 0.05},
    "uniswap": {"sigma": 0.95, "mu": 0.05, "turnover": 0.04},
}

# Default parameters for assets not in the list above
DEFAULT_PARAMS: dict[str, float] = {"sigma": 0.80, "mu": 0.05, "turnover": 0.04}

# Correlation groups for the simulator's Cholesky decomposition
# Assets in the same group have higher intra-group correlation
CORRELATION_GROUPS: dict[str, set[str]] = {
    "majors": {"bitcoin", "ethereum", "binancecoin", "litecoin"},
    "altcoins": {"solana", "ripple", "cardano", "avalanche-2", "chainlink", "polkadot", "uniswap"},
    "stablecoins": {"tether", "usd-coin"},
}

# Correlation coefficients
INTRA_MAJORS_CORR = 0.8  # Majors move with bitcoin
INTRA_ALTCOIN_CORR = 0.7  # Altcoins move together
CROSS_GROUP_CORR = 0.6  # Majors vs altcoins
DOGE_CORR = 0.4  # DOGE does its own thing
STABLECOIN_CORR = 0.0  # Pegged assets ignore the market
DEFAULT_CORR = 0.5  # Unknown assets

# Units of each quote currency per USD
FX_RATES: dict[str, float] = {
    "usd": 1.0,
    "eur": 0.92,
    "gbp": 0.79,
    "jpy": 151.0,
    "inr": 83.0,
    "aud": 1.52,
    "cad": 1.36,
}
