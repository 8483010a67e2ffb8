"""
Hydra-based trade replay for lotledger.

Reads a trades CSV, books every trade into a fresh ledger, matches sales to
lots with the configured accounting policy and prints the resulting lots and
realized gains.

Usage:
    # Replay the default trades.csv with FIFO matching:
    lotledger-report

    # Point at another file and switch to LIFO:
    lotledger-report data.trades_csv=history/2024.csv ledger.policy=lifo

    # Report in euros, three decimal places, gains only:
    lotledger-report ledger.currency=EUR report.places=3 report.show_lots=false
"""

import logging
import os
from fractions import Fraction

import hydra
from omegaconf import DictConfig, OmegaConf, open_dict

from lotledger.engine.trade_ledger import TradeLedger
from lotledger.policies import BaseAccountingPolicy, FIFOPolicy, LIFOPolicy
from lotledger.reports import LotsReport, RealizedGainsReport
from lotledger.utils.numeric import quantize
from lotledger.utils.trade_loader import BaseTradeLoader, CsvTradeLoader

log = logging.getLogger(__name__)

POLICIES = {
    "fifo": FIFOPolicy,
    "lifo": LIFOPolicy,
}


def build_policy(cfg: DictConfig) -> BaseAccountingPolicy:
    """Instantiate the accounting policy named in the config."""
    policy_name = str(cfg.ledger.policy).lower()
    if policy_name not in POLICIES:
        raise ValueError(f"Unknown accounting policy: {cfg.ledger.policy}")
    return POLICIES[policy_name]()


def build_ledger(cfg: DictConfig) -> TradeLedger:
    return TradeLedger(
        currency=cfg.ledger.currency,
        currency_namespace=cfg.ledger.get("currency_namespace", "ISO4217"),
        policy=build_policy(cfg),
        cash_account=cfg.ledger.get("cash_account", "Cash"),
    )


def build_trade_loader(cfg: DictConfig) -> BaseTradeLoader:
    return CsvTradeLoader(
        cfg.data.trades_csv,
        default_namespace=cfg.data.get("default_namespace", "SECURITY"),
        dayfirst=cfg.data.get("dayfirst", False),
    )


def format_table(df, places):
    """Render a report DataFrame, rounding exact numbers for display."""
    shown = df[[c for c in df.columns if not c.endswith("_float")]].copy()
    for col in shown.columns:
        if shown[col].map(lambda x: isinstance(x, Fraction)).any():
            shown[col] = shown[col].map(lambda x: quantize(x, places) if isinstance(x, Fraction) else x)
    return shown.to_string(index=False)


@hydra.main(version_base=None, config_path="configs", config_name="config")
def main(cfg: DictConfig):
    # Hydra changes cwd to the output dir; resolve relative paths against original cwd
    orig_cwd = hydra.utils.get_original_cwd()
    trades_csv = OmegaConf.select(cfg, "data.trades_csv")
    if trades_csv is not None and not os.path.isabs(trades_csv):
        with open_dict(cfg):
            cfg.data.trades_csv = os.path.join(orig_cwd, trades_csv)

    log.info("Configuration:\n%s", OmegaConf.to_yaml(cfg))

    ledger = build_ledger(cfg)
    loader = build_trade_loader(cfg)
    gains = ledger.load_trades(loader)

    places = cfg.report.places
    print("\n" + "=" * 60)
    print("LOT REPORT")
    print("=" * 60)
    print(f"Trades file:  {cfg.data.trades_csv}")
    print(f"Policy:       {ledger.policy.name}")
    print(f"Currency:     {ledger.currency.mnemonic}")
    print(f"Realized:     {len(gains)} gain/loss record(s)")

    if cfg.report.show_lots:
        print("-" * 60)
        lots = LotsReport().generate(ledger)
        print(format_table(lots, places) if not lots.empty else "  (no lots)")

    if cfg.report.show_gains:
        print("-" * 60)
        report = RealizedGainsReport()
        realized = report.generate(ledger)
        if realized.empty:
            print("  (no realized gains)")
        else:
            print(format_table(realized, places))
            print("-" * 60)
            print(format_table(report.summarize(realized), places))
    print("=" * 60)

    return gains


if __name__ == "__main__":
    main()
