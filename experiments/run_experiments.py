"""
experiments/run_experiments.py

Experiment harness that loads the baseline config, applies scenario overrides,
runs multiple seeded replications, and reports per-line KPIs with confidence
intervals. Mean line lengths per minute are plotted for each scenario.

Run with:  python -m experiments.run_experiments [path/to/config.yaml]
"""

from __future__ import annotations
import copy, logging, math, os, sys
from typing import Callable, Dict, List, Optional
from statistics import mean, stdev
from scipy.stats import t as student_t

from cafsim.config import ROOT, load_config
from cafsim.engine import run_one_replication
from experiments.scenarios import SCENARIOS

logger = logging.getLogger(__name__)

OUTPUT_DIR = os.path.join(ROOT, "experiments", "output")

def apply_overrides(cfg: Dict, overrides: Dict) -> Dict:
    """Apply scenario overrides (recursive merge) on top of the base config."""
    new = copy.deepcopy(cfg)

    def _merge(dst: Dict, src: Dict):
        for key, val in src.items():
            if isinstance(val, dict) and isinstance(dst.get(key), dict):
                _merge(dst[key], val)
            else:
                dst[key] = copy.deepcopy(val)

    _merge(new, overrides)
    return new

def mean_ci(values: List[float], confidence_level: float) -> tuple[float, float]:
    """Return (mean, half-width) using a t-distribution critical value."""
    if not values:
        return 0.0, 0.0
    mu = mean(values)
    n = len(values)
    if n < 2:
        return mu, 0.0
    level = min(max(confidence_level, 0.0), 0.999999)
    alpha = 1.0 - level
    tcrit = student_t.ppf(1 - alpha / 2.0, n - 1)
    half = tcrit * (stdev(values) / math.sqrt(n))
    return mu, float(half)

def sample_stddev(values: List[float]) -> float:
    """Return sample standard deviation or 0 if insufficient data."""
    if len(values) < 2:
        return 0.0
    return stdev(values)

def series(results: List[Dict], extractor: Callable[[Dict], float]) -> List[float]:
    """Collect a numeric series from each replication result."""
    return [float(extractor(res)) for res in results]

def run_replications(base_cfg: Dict, replications: int, seed: int) -> List[Dict]:
    """Run `replications` days with seeds seed, seed+1, ... and return their summaries."""
    results = []
    for rep in range(replications):
        cfg = copy.deepcopy(base_cfg)
        cfg.setdefault("sim", {})["seed"] = seed + rep
        results.append(run_one_replication(cfg))
    return results

def mean_occupancy_series(results: List[Dict]) -> List[Dict]:
    """
    Average per-minute line occupancy across replications. Every replication
    of a scenario shares the horizon, so minutes line up index by index.
    """
    if not results:
        return []
    n_minutes = min(len(res.get("time_series", [])) for res in results)
    averaged = []
    for i in range(n_minutes):
        points = [res["time_series"][i] for res in results]
        lines = points[0]["occupancy"].keys()
        averaged.append({
            "minute": points[0]["minute"],
            "arrivals": sum(p["arrivals"] for p in points) / len(points),
            "occupancy": {ln: sum(p["occupancy"][ln] for p in points) / len(points) for ln in lines},
        })
    return averaged

def plot_occupancy(avg_series: List[Dict], scenario_name: str, out_dir: str = OUTPUT_DIR) -> Optional[str]:
    """Persist a PNG of mean line length per minute, one curve per line."""
    if not avg_series:
        return None
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    x = [pt["minute"] for pt in avg_series]
    plt.figure(figsize=(9, 5))
    for ln in sorted(avg_series[0]["occupancy"]):
        plt.plot(x, [pt["occupancy"][ln] for pt in avg_series], linewidth=1.5, label=f"Line {ln + 1}")
    plt.xlim(left=0, right=max(x))
    plt.xlabel("Time (minutes)")
    plt.ylabel("Mean students in line")
    plt.title(f"{scenario_name}: line length by minute")
    plt.legend()
    plt.grid(True, linestyle="--", alpha=0.4)
    os.makedirs(out_dir, exist_ok=True)
    safe_name = scenario_name.lower().replace(" ", "_")
    out_path = os.path.join(out_dir, f"{safe_name}_line_lengths.png")
    plt.tight_layout()
    plt.savefig(out_path, dpi=160)
    plt.close()
    return out_path

def run_crn(cfg: Dict, sc_a: Dict, sc_b: Dict, replications: int, base_seed: int, confidence: float):
    """
    Compare two scenarios with common random numbers (same seed per
    replication) and report the paired difference in average wait.
    """
    cfg_a = apply_overrides(cfg, sc_a["overrides"])
    cfg_b = apply_overrides(cfg, sc_b["overrides"])
    res_a = run_replications(cfg_a, replications, base_seed)
    res_b = run_replications(cfg_b, replications, base_seed)
    diffs = [b["avg_wait_seconds"] - a["avg_wait_seconds"] for a, b in zip(res_a, res_b)]
    mu, half = mean_ci(diffs, confidence)
    print(f"\nCRN comparison: {sc_b['name']} - {sc_a['name']} (replications={replications}, seeds shared)")
    print("  Replication | Seed | Wait1 | Wait2 | Difference")
    for idx, (a, b) in enumerate(zip(res_a, res_b)):
        print(f"    {idx + 1:2d}        | {base_seed + idx:4d} | {a['avg_wait_seconds']:.2f}s"
              f" | {b['avg_wait_seconds']:.2f}s | {b['avg_wait_seconds'] - a['avg_wait_seconds']:+.2f}s")
    print(f"  Mean difference: {mu:+.2f}s")
    print(f"  {confidence*100:.1f}% CI of mean diff: {mu - half:+.2f}s to {mu + half:+.2f}s")
    return mu, half

def report_scenario(name: str, results: List[Dict], confidence: float, seed_range: tuple):
    """Print mean ± half-width KPIs for one scenario."""
    level_pct = confidence * 100.0
    print(f"Scenario: {name} (replications={len(results)}, {level_pct:.1f}% CI, seeds {seed_range[0]}-{seed_range[1]})")
    generated = mean_ci(series(results, lambda r: r["generated"]), confidence)
    served = mean_ci(series(results, lambda r: r["served"]), confidence)
    residual = mean_ci(series(results, lambda r: r["residual"]), confidence)
    wait = mean_ci(series(results, lambda r: r["avg_wait_seconds"]), confidence)
    wait_sd = sample_stddev(series(results, lambda r: r["avg_wait_seconds"]))
    print(f"  Students/run: {generated[0]:.1f} ± {generated[1]:.1f}")
    print(f"  Served/run: {served[0]:.1f} ± {served[1]:.1f}")
    print(f"  Left in line at close: {residual[0]:.1f} ± {residual[1]:.1f}")
    print(f"  Avg wait (all lines): {wait[0]:.2f} ± {wait[1]:.2f} s (sd {wait_sd:.2f})")
    for ln in sorted(results[0]["served_by_line"]):
        ln_wait = mean_ci(series(results, lambda r: r["avg_wait_by_line"][ln]), confidence)
        ln_served = mean_ci(series(results, lambda r: r["served_by_line"][ln]), confidence)
        ln_left = mean_ci(series(results, lambda r: r["residual_by_line"][ln]), confidence)
        ln_util = mean(series(results, lambda r: r["utilization_by_line"][ln])) * 100.0
        print(f"  Line {ln + 1}: served {ln_served[0]:.1f} ± {ln_served[1]:.1f}, "
              f"wait {ln_wait[0]:.2f} ± {ln_wait[1]:.2f} s, "
              f"left {ln_left[0]:.1f} ± {ln_left[1]:.1f}, busy {ln_util:.1f}%")

def main(argv: Optional[List[str]] = None):
    """Entry point: drive all scenarios, replications, and report KPIs."""
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    argv = sys.argv[1:] if argv is None else argv
    cfg = load_config(argv[0] if argv else None)
    exp_cfg = cfg.get("experiments", {}) or {}
    replications = max(1, int(exp_cfg.get("replications", 1)))
    confidence = float(exp_cfg.get("confidence_level", 0.95))
    make_plots = bool(exp_cfg.get("plot", True))
    default_seed = cfg.get("sim", {}).get("seed") or 0

    # Engine progress and normalization notices repeat on every replication
    logging.getLogger("cafsim.engine").setLevel(logging.WARNING)
    logging.getLogger("cafsim.arrivals").setLevel(logging.ERROR)

    for sc in SCENARIOS:
        sc_cfg = apply_overrides(cfg, sc["overrides"])
        seed = sc_cfg.get("sim", {}).get("seed") or default_seed
        results = run_replications(sc_cfg, replications, seed)
        report_scenario(sc["name"], results, confidence, (seed, seed + replications - 1))
        if make_plots:
            path = plot_occupancy(mean_occupancy_series(results), sc["name"])
            if path:
                print(f"  Line length plot saved to: {path}")
        print("-")

    crn_pairs = exp_cfg.get("crn_compare") or []
    sc_index = {s["name"]: s for s in SCENARIOS}
    for pair in crn_pairs:
        if len(pair) != 2 or pair[0] not in sc_index or pair[1] not in sc_index:
            logger.warning("skipping CRN entry (needs 2 known scenario names): %s", pair)
            continue
        run_crn(cfg, sc_index[pair[0]], sc_index[pair[1]], replications, default_seed, confidence)

if __name__ == "__main__":
    main()
