"""
Helper script for generating a bearer token.

Be sure that you are using the same secret when running this script as when
you run the app with ``TOKEN_STORE=jwt``. Set ``JWT_SECRET=somesecret`` in your
environment to ensure that the same secret is always used.

.. code-block:: bash

   $ JWT_SECRET=foosecret generate-token --name jbloggs --expires 3600
   eyJ0eXAiOiJKV1QiLCJhbGciOiJIUzI1NiJ9...

Use the token in your requests with the header
``Authorization: Bearer [token]``.
"""

import click

from .domain import Identity
from .tokens import encode


@click.command()
@click.option('--name', prompt='User name')
@click.option('--secret', envvar='JWT_SECRET', required=True,
              help='Secret used to sign the token; defaults to $JWT_SECRET')
@click.option('--expires', type=int, default=None,
              help='Lifetime of the token in seconds')
def generate_token(name: str, secret: str, expires: int) -> None:
    """Generate a bearer token for the JWT token store."""
    click.echo(encode(Identity(name=name), secret, expires_in=expires))


if __name__ == '__main__':
    generate_token()
