"""taxmate — Australian income tax estimator."""

__version__ = "0.1.0"

from taxmate.analytics.curves import TaxCurve as TaxCurve
from taxmate.analytics.curves import income_grid as income_grid
from taxmate.analytics.curves import tax_curve as tax_curve
from taxmate.config.defaults import default_inputs as default_inputs
from taxmate.config.schema import Deductions as Deductions
from taxmate.config.schema import TaxInputs as TaxInputs
from taxmate.core.engine import TaxResult as TaxResult
from taxmate.core.engine import estimate as estimate
from taxmate.io.forms import FormData as FormData
from taxmate.io.forms import inputs_from_form as inputs_from_form
from taxmate.io.store import ResultStore as ResultStore
from taxmate.taxes.payg import estimate_withholding as estimate_withholding
from taxmate.taxes.year import TaxYearRules as TaxYearRules
from taxmate.taxes.year import load_tax_year as load_tax_year
