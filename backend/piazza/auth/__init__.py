# Email/password registration, login and bearer-token dependencies.
