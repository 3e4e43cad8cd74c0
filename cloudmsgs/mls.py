"""Settings for moving-least-squares surface smoothing and their reconfiguration."""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass

_log = logging.getLogger(__name__)

_MIN_FIT_ORDER = 2


@dataclass(frozen=True)
class MLSConfig:
    """A requested set of smoothing parameters."""

    search_radius: float = 0.0
    spatial_locator: int = 0
    use_polynomial_fit: bool = False
    polynomial_order: int = 0
    gaussian_parameter: float = 0.0


@dataclass
class MovingLeastSquaresSettings:
    """Current smoothing parameters.

    ``polynomial_order`` is the last order requested through a config.
    ``fitted_polynomial_order`` is the order the fit actually uses. Toggling
    ``use_polynomial_fit`` can change it without changing the requested order.
    """

    search_radius: float
    spatial_locator: int
    use_polynomial_fit: bool = False
    polynomial_order: int = 0
    gaussian_parameter: float = 0.0
    fitted_polynomial_order: int = _MIN_FIT_ORDER

    def apply(self, config: MLSConfig) -> frozenset[str]:
        """Take over every value of ``config`` that differs from the current one.

        Returns the names of the settings that changed. Turning on
        ``use_polynomial_fit`` is deprecated and emits a DeprecationWarning.
        """
        changed: set[str] = set()

        if self.search_radius != config.search_radius:
            self.search_radius = config.search_radius
            _log.debug("setting the search radius: %f", self.search_radius)
            changed.add("search_radius")

        if self.spatial_locator != config.spatial_locator:
            self.spatial_locator = config.spatial_locator
            _log.debug("setting the spatial locator to type: %d", self.spatial_locator)
            changed.add("spatial_locator")

        if self.use_polynomial_fit != config.use_polynomial_fit:
            self.use_polynomial_fit = config.use_polynomial_fit
            _log.debug("setting the use_polynomial_fit flag to: %d", self.use_polynomial_fit)
            if self.use_polynomial_fit:
                warnings.warn(
                    "use_polynomial_fit is deprecated, use polynomial_order instead",
                    DeprecationWarning,
                    stacklevel=2,
                )
                if self.fitted_polynomial_order < _MIN_FIT_ORDER:
                    self.fitted_polynomial_order = _MIN_FIT_ORDER
            else:
                self.fitted_polynomial_order = 0
            changed.add("use_polynomial_fit")

        if self.polynomial_order != config.polynomial_order:
            self.polynomial_order = config.polynomial_order
            _log.debug("setting the polynomial order to: %d", self.polynomial_order)
            self.fitted_polynomial_order = self.polynomial_order
            changed.add("polynomial_order")

        if self.gaussian_parameter != config.gaussian_parameter:
            self.gaussian_parameter = config.gaussian_parameter
            _log.debug("setting the gaussian parameter to: %f", self.gaussian_parameter)
            changed.add("gaussian_parameter")

        return frozenset(changed)

    def squared_gaussian_parameter(self) -> float:
        """Return the square of the Gaussian weighting parameter."""
        return self.gaussian_parameter * self.gaussian_parameter