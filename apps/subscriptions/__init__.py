"""Owner subscription plans and listing quota."""
