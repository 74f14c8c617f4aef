"""Weekly scoring service for the box office fantasy league."""
