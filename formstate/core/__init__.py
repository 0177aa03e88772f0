"""
Core package: state access, mutation intents, validation passes, the submit
workflow and the form controller.

Modules are imported directly (``formstate.core.form`` etc.); this package
does not re-export them, so the runtime package can depend on core helpers
without import cycles.
"""
