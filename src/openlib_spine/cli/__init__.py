"""openlib-spine command line interface."""
