"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of screens, storage or report rendering.
It deals with plank geometry, strand patterns and slippage statistics.
"""
