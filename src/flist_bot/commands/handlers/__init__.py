"""Command handler modules; each registers itself with ``flist_bot.commands.REGISTRY``."""
