"""Runboard: moderation back end for speedrun leaderboards."""
