"""
-------------------------------------------------------------------------
System: GBMS (Government Budget Management System)
Client: Ministry of Finance, Budget Division
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Application packages for GBMS.
-------------------------------------------------------------------------
"""
