"""
Ledger App - Blood Credit Ledger

Donations earn credits for donors. Credits are spent only through consent
requests the credit owner approves, or advanced as debt by an emergency
override. Every movement is an immutable ledger transaction.

Architecture:
- Models: LedgerTransaction, CreditEvent, ConsentRequest, EmergencyCase, ExchangeProposal
- Store: LedgerStore (database alias + atomic unit of work)
- Services: donation recording, consent workflow, emergency override, exchanges, queries
- Policy: single capability table enforced by HasLedgerCapability
- Exceptions: DomainError hierarchy rendered by config.exceptions
"""
