"""Services: loading migration scripts and turning them into API calls."""
