import math
import warnings
from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

import sympy as sp
from sympy.printing.lambdarepr import LambdaPrinter

from ..core.value import UncertainValue, to_uncertain
from ..umath import functions as umath


# Names understood when parsing a string expression
_SYMPY_FUNCTIONS = {
    'exp': sp.exp, 'log': sp.log, 'sqrt': sp.sqrt, 'Abs': sp.Abs,
    'sin': sp.sin, 'cos': sp.cos, 'tan': sp.tan,
    'asin': sp.asin, 'acos': sp.acos, 'atan': sp.atan, 'atan2': sp.atan2,
    'sinh': sp.sinh, 'cosh': sp.cosh, 'tanh': sp.tanh,
    'asinh': sp.asinh, 'acosh': sp.acosh, 'atanh': sp.atanh,
    'pi': sp.pi, 'e': sp.E
}

# What lambdify-generated code calls at evaluation time
_ENGINE_NAMESPACE = {
    'exp': umath.exp, 'log': umath.log, 'sqrt': umath.sqrt, 'Abs': umath.fabs,
    'sin': umath.sin, 'cos': umath.cos, 'tan': umath.tan,
    'asin': umath.asin, 'acos': umath.acos, 'atan': umath.atan, 'atan2': umath.atan2,
    'sinh': umath.sinh, 'cosh': umath.cosh, 'tanh': umath.tanh,
    'asinh': umath.asinh, 'acosh': umath.acosh, 'atanh': umath.atanh,
    'pi': math.pi, 'e': math.e, 'E': math.e
}


class _EnginePrinter(LambdaPrinter):
    """Prints integer powers as repeated products.

    sympy folds ``x*x`` into ``x**2``, and ``**`` on uncertain values needs a
    positive base while products do not.
    """

    def _print_Pow(self, expr, rational=False):
        if not expr.exp.is_Integer:
            return super()._print_Pow(expr, rational=rational)
        n = int(expr.exp)
        if n == 0:
            return '1'
        base = f'({self._print(expr.base)})'
        product = '*'.join([base] * abs(n))
        return f'({product})' if n > 0 else f'(1/({product}))'


def _engine_printer() -> _EnginePrinter:
    return _EnginePrinter({
        'fully_qualified_modules': False,
        'inline': True,
        'allow_unknown_functions': True,
        'user_functions': {name: name for name in _ENGINE_NAMESPACE}
    })


@dataclass
class PropagationResult:
    """Result of propagating uncertainties through an expression"""
    expression: sp.Expr
    symbolic_uncertainty: sp.Expr
    numeric_result: UncertainValue
    sensitivity_coefficients: Dict[str, float]
    relative_contributions: Dict[str, float]
    info: Dict[str, Any]


def propagate_uncertainties_symbolic(
    expression: Union[str, sp.Expr],
    variables: Dict[str, Union[UncertainValue, Tuple[float, float]]],
    simplify: bool = False
) -> PropagationResult:
    """
    Evaluate a symbolic expression on uncertain values.

    The expression is compiled with sympy and evaluated through the
    correlation-tracking engine, so passing the same (or related) uncertain
    values for several names gives correctly correlated results.

    Parameters
    ----------
    expression : str or sympy expression
        Mathematical expression as string or SymPy expression
    variables : dict
        Dictionary mapping variable names to UncertainValue objects or
        (nominal, stddev) tuples
    simplify : bool
        Whether to simplify the expression and its uncertainty formula

    Returns
    -------
    PropagationResult
        Object containing the symbolic formulas, the numeric result and
        per-variable diagnostics
    """

    # Parse expression if string
    if isinstance(expression, str):
        local_dict = dict(_SYMPY_FUNCTIONS)
        local_dict.update({name: sp.Symbol(name, real=True) for name in variables})
        expression = sp.parse_expr(expression, local_dict=local_dict)
    else:
        expression = sp.sympify(expression)

    if simplify:
        expression = sp.simplify(expression)

    # Convert variables to UncertainValue objects
    values = {}
    for name, var in variables.items():
        if isinstance(var, UncertainValue):
            values[name] = var
        elif isinstance(var, tuple) and len(var) == 2:
            values[name] = UncertainValue(var[0], var[1])
        else:
            raise ValueError(
                f"Variable '{name}' must be an UncertainValue or a (nominal, stddev) tuple"
            )

    symbols_by_name = {str(s): s for s in expression.free_symbols}
    unknown = set(symbols_by_name) - set(values)
    if unknown:
        raise ValueError(f"Expression uses unknown variables: {', '.join(sorted(unknown))}")
    unused = set(values) - set(symbols_by_name)
    if unused:
        warnings.warn(f"Variables not used in expression: {', '.join(sorted(unused))}")

    names = list(values)
    symbols = [symbols_by_name.get(name, sp.Symbol(name, real=True)) for name in names]

    # Numerical evaluation through the engine
    func = sp.lambdify(symbols, expression, modules=[_ENGINE_NAMESPACE], printer=_engine_printer())
    numeric_result = to_uncertain(func(*[values[name] for name in names]))

    # Symbolic partial derivatives, evaluated at the nominal values
    subs_dict = {symbol: values[name].nominal for name, symbol in zip(names, symbols)}
    # differentiate with real stand-ins so Abs and friends have real derivatives
    as_real = {s: sp.Symbol(s.name, real=True) for s in symbols if not s.is_real}
    from_real = {real: s for s, real in as_real.items()}
    real_expression = expression.xreplace(as_real)
    derivatives = {}
    sensitivity = {}
    contributions = {}
    for name, symbol in zip(names, symbols):
        derivatives[name] = sp.diff(
            real_expression, as_real.get(symbol, symbol)
        ).xreplace(from_real)
        sensitivity[name] = float(derivatives[name].subs(subs_dict))
        contributions[name] = (sensitivity[name] * values[name].stddev) ** 2

    # Normalize relative contributions
    total = sum(contributions.values())
    if total > 0:
        for name in contributions:
            contributions[name] /= total

    # Uncertainty formula for independent inputs
    uncertainty_expr = sp.sqrt(sum(
        (derivatives[name] * sp.Symbol(f'sigma_{name}')) ** 2 for name in names
    ))
    if simplify:
        uncertainty_expr = sp.simplify(uncertainty_expr)

    correlated_inputs = any(
        values[a].covariance(values[b]) != 0.0
        for i, a in enumerate(names) for b in names[i + 1:]
    )

    return PropagationResult(
        expression=expression,
        symbolic_uncertainty=uncertainty_expr,
        numeric_result=numeric_result,
        sensitivity_coefficients=sensitivity,
        relative_contributions=contributions,
        info={
            'method': 'taylor',
            'derivatives': derivatives,
            'simplified': simplify,
            'correlated_inputs': correlated_inputs,
            'num_variables': numeric_result.num_variables()
        }
    )
