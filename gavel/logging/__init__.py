"""Auction logging and export."""

from gavel.logging.auction_log import AuctionLog, AuctionLogEntry, BidRecord

__all__ = ["AuctionLog", "AuctionLogEntry", "BidRecord"]
