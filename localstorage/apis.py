"""Registration of every API group of the package with a scheme."""

from __future__ import annotations

from localstorage import v1, v1alpha1
from localstorage.meta import Scheme, SchemeBuilder

ADD_TO_SCHEMES: tuple[SchemeBuilder, ...] = (v1.SCHEME_BUILDER, v1alpha1.SCHEME_BUILDER)


def add_to_scheme(scheme: Scheme) -> None:
    """Add every kind defined by the package to the scheme."""
    for builder in ADD_TO_SCHEMES:
        builder.add_to_scheme(scheme)