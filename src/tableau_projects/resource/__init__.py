"""Resource controller and declarative state for Tableau projects."""
