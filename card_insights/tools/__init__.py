"""Query templates, exploration and export tools"""
