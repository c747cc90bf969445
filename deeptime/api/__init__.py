"""HTTP surface: scene manager, schemas, routes and the app factory."""
