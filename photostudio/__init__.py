"""Product photo studio - generate, validate and archive product creatives."""
