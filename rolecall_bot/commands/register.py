"""Registration of slash commands for the bot."""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from ..adapters.guild import GuildDirectory
from ..config import Settings
from ..core import messages
from ..core.classifier import RequestClassifier
from ..core.errors import MutationError
from ..core.notify import DeliveryResult, Notifier
from ..core.storage import MemberRegistry
from .utils import chunk_lines, has_command_role

log = logging.getLogger("rolecall.commands")


def help_embed(request_channel_id: int | None) -> discord.Embed:
    where = f"In <#{request_channel_id}>:" if request_channel_id else "In the request channel:"
    embed = discord.Embed(title="🤖 Bot Commands", color=0x7289DA)
    embed.add_field(
        name="Role Request",
        value=f"{where}\n```\n{messages.FORMAT_EXAMPLE}\n```",
        inline=False,
    )
    embed.add_field(
        name="Staff Commands",
        value="`/remove_member` `/name_notice` `/request_stats`",
        inline=False,
    )
    embed.add_field(
        name="Utility", value="`/members` - Role holders\n`/help` - This menu", inline=False
    )
    return embed


def register_commands(
    bot: commands.Bot,
    settings: Settings,
    registry: MemberRegistry,
    classifier: RequestClassifier,
    notifier: Notifier,
) -> None:
    """Register the member management commands on ``bot.tree``."""
    tree = bot.tree

    async def deny(interaction: discord.Interaction) -> bool:
        if has_command_role(interaction.user, settings.command_role_id):
            return False
        await interaction.response.send_message(
            "❌ Insufficient permissions", ephemeral=True
        )
        return True

    def role_members(guild: discord.Guild) -> list[discord.Member]:
        role = guild.get_role(settings.role_id) if settings.role_id else None
        return list(role.members) if role else []

    @tree.command(name="members", description="List all members with the role")
    async def members(interaction: discord.Interaction) -> None:
        holders = role_members(interaction.guild)
        if not holders:
            await interaction.response.send_message(
                "No members hold the role yet.", ephemeral=True
            )
            return
        lines = sorted(f"• {m.nick or m.name}" for m in holders)
        pages = chunk_lines(lines)
        embed = discord.Embed(title="Role Members", description=pages[0])
        embed.set_footer(text=f"Total: {len(holders)} members")
        await interaction.response.send_message(embed=embed, ephemeral=True)
        # plain follow-up content is capped at 2000 characters, embeds are not
        for page in pages[1:]:
            await interaction.followup.send(
                embed=discord.Embed(description=page), ephemeral=True
            )

    @tree.command(name="remove_member", description="Remove the role from a member")
    @discord.app_commands.describe(member="Member to remove the role from")
    async def remove_member(
        interaction: discord.Interaction, member: discord.Member
    ) -> None:
        if await deny(interaction):
            return
        if settings.role_id is None:
            await interaction.response.send_message(
                "No target role is configured.", ephemeral=True
            )
            return
        await interaction.response.defer(ephemeral=True)
        directory = GuildDirectory(interaction.guild, reason="Role removed by staff")
        try:
            await directory.remove_role(member.id, settings.role_id)
        except MutationError:
            log.exception("Could not remove role from %s", member.id)
            await interaction.followup.send("❌ Failed to remove role", ephemeral=True)
            return
        registry.delete(member.id)
        await notifier.notify(member.id, messages.role_removed(str(interaction.user)))
        await notifier.operator(
            f"🔴 **Role Removed**\n<@{member.id}> was removed by <@{interaction.user.id}>"
        )
        await interaction.followup.send(
            f"✅ Removed the role from {member.mention}", ephemeral=True
        )

    @tree.command(name="help", description="How to request the role")
    async def help_command(interaction: discord.Interaction) -> None:
        await interaction.response.send_message(
            embed=help_embed(settings.request_channel_id), ephemeral=True
        )

    @tree.command(name="name_notice", description="DM the name format to role members")
    @discord.app_commands.describe(message="Custom message to include")
    async def name_notice(
        interaction: discord.Interaction, message: str | None = None
    ) -> None:
        if await deny(interaction):
            return
        await interaction.response.defer(ephemeral=True)
        text = messages.name_notice(message or "")
        failed: list[str] = []
        sent = 0
        for member in role_members(interaction.guild):
            result = await notifier.notify(member.id, text)
            if result is DeliveryResult.DELIVERED:
                sent += 1
            else:
                failed.append(member.mention)
        embed = discord.Embed(
            title="📨 DM Notice Results",
            description="Sent name format reminder to role members",
        )
        embed.add_field(name="Successful", value=str(sent), inline=True)
        embed.add_field(name="Failed", value=str(len(failed)), inline=True)
        if failed:
            embed.set_footer(text=f"Couldn't DM: {', '.join(failed)}"[:2048])
        await interaction.followup.send(embed=embed, ephemeral=True)

    @tree.command(name="request_stats", description="Statistics on role requests")
    async def request_stats(interaction: discord.Interaction) -> None:
        if await deny(interaction):
            return
        stats = classifier.stats
        embed = discord.Embed(title="📈 Role Request Statistics")
        embed.add_field(name="Accepted", value=str(stats["accepted"]), inline=True)
        embed.add_field(
            name="Rejected",
            value=str(sum(v for k, v in stats.items() if k != "accepted")),
            inline=True,
        )
        embed.add_field(name="Registered", value=str(len(registry)), inline=True)
        for reason in ("format", "mention", "cooldown", "duplicate", "permission", "system"):
            if stats[reason]:
                embed.add_field(name=reason.title(), value=str(stats[reason]), inline=True)
        embed.set_footer(text="Data since bot launch")
        await interaction.response.send_message(embed=embed, ephemeral=True)
