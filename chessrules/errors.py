"""Exceptions raised by engine commands."""

from __future__ import annotations


class ChessRulesError(ValueError):
    """Base class for rule violations reported by the engine."""


class EmptySquareError(ChessRulesError):
    """A move was requested from a square holding no piece."""


class IllegalMoveError(ChessRulesError):
    """The requested destination is not among the piece's legal moves."""


class PromotionRequiredError(ChessRulesError):
    """A pawn reaches the last row and no promotion piece was chosen."""


class InvalidPromotionError(ChessRulesError):
    """The promotion piece is not allowed, or the move does not promote."""


class GameOverError(ChessRulesError):
    """The game already ended in checkmate or stalemate."""
