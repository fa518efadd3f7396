"""Employee onboarding form: validation schema, family sub-form state and submission."""
