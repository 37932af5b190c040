"""LIBRIS test suite.

Folder taxonomy
- unit/         : Domain rules, managers and handlers over the in-memory store.
- integration/  : SQLAlchemy repositories, migrations and races on real databases.
- functional/   : The ``libris`` CLI driven through ``CliRunner``.
- fixtures/     : Engines, containers and data factories (no tests here).

Markers
- The root conftest marks each test after its folder (unit, integration, functional).
- ``slow`` marks threaded or container-heavy tests; ``property`` marks Hypothesis tests.
- Postgres variants are skipped when Docker is not reachable.
"""
