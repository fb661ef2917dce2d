"""Business services shared by the HTTP blueprints."""
