"""Cyclopts application and command routing for the expbundle CLI.

The CLI provides the following commands:
- modify: Set a component property in an ExperienceBundle page JSON file
- check-config: Validate a connection configuration file
"""

from cyclopts import App

from expbundle.cli import commands

app = App(
    name="expbundle",
    help="Modify Experience Cloud ExperienceBundle JSON files",
    version="0.1.0",
)

app.command(commands.modify)
app.command(commands.check_config, name="check-config")
