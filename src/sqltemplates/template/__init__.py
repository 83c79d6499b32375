"""Template engine: parser, value model, macro registry and renderer."""
