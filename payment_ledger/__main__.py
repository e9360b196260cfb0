from payment_ledger.payment_engine import main

main()
