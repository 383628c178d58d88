from hottakes.db.models.cloud_board import CloudBoardRecord

__all__ = ["CloudBoardRecord"]
