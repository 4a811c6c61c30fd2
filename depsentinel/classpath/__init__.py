"""Classpath resolvers — map declared dependencies to exported symbols."""

from depsentinel.classpath.base import ClasspathResolver
from depsentinel.classpath.chain import ChainedResolver
from depsentinel.classpath.jar import GradleCacheResolver, MavenRepositoryResolver, read_jar_types
from depsentinel.classpath.static import StaticClasspathResolver

__all__ = [
    "ChainedResolver",
    "ClasspathResolver",
    "GradleCacheResolver",
    "MavenRepositoryResolver",
    "StaticClasspathResolver",
    "read_jar_types",
]
