from pricewise.engine.batch import (
    best_batch_tier,
    break_even_quantity,
    compute_batch_tiers,
    optimal_bulk_tier,
    tiers_from_bulk_discounts,
)
from pricewise.engine.discount import analyze_discounts, summarize_discounts
from pricewise.engine.fees import evaluate_fees, get_platform_schedule, make_fee_term
from pricewise.engine.overhead import allocate_overhead, apply_overhead, overhead_by_category
from pricewise.engine.payment import available_payment_methods, calculate_payment_fees
from pricewise.engine.product_cost import (
    calculate_bundle_cost,
    calculate_bundle_discount,
    calculate_product_cost,
    profit_per_hour,
)
from pricewise.engine.profile import SellerProfile, build_input, vat_threshold_status
from pricewise.engine.profit import (
    CalculationInput,
    best_platform,
    calculate,
    compare_platforms,
    evaluate_profit,
)
from pricewise.engine.scenario import (
    best_case,
    build_scenario_params,
    evaluate_presets,
    evaluate_scenario,
    worst_case,
)

__all__ = [
    "CalculationInput",
    "SellerProfile",
    "allocate_overhead",
    "analyze_discounts",
    "apply_overhead",
    "available_payment_methods",
    "best_batch_tier",
    "best_case",
    "best_platform",
    "break_even_quantity",
    "build_input",
    "build_scenario_params",
    "calculate",
    "calculate_bundle_cost",
    "calculate_bundle_discount",
    "calculate_payment_fees",
    "calculate_product_cost",
    "compare_platforms",
    "compute_batch_tiers",
    "evaluate_fees",
    "evaluate_presets",
    "evaluate_profit",
    "evaluate_scenario",
    "get_platform_schedule",
    "make_fee_term",
    "optimal_bulk_tier",
    "overhead_by_category",
    "profit_per_hour",
    "summarize_discounts",
    "tiers_from_bulk_discounts",
    "vat_threshold_status",
    "worst_case",
]
